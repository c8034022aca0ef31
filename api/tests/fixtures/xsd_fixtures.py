"""XSD documents shared by the metadata tree tests."""

from xsd_metadata.services.domain.schema import SchemaGraph, build_schema_graph

TEST_NS = "http://example.com/test"

ORDER_XSD = b"""<?xml version="1.0" encoding="UTF-8"?>
<xs:schema
  xmlns:xs="http://www.w3.org/2001/XMLSchema"
  xmlns:test="http://example.com/test"
  targetNamespace="http://example.com/test"
  elementFormDefault="qualified">

  <xs:element name="Order" type="test:OrderType"/>

  <xs:complexType name="OrderType">
    <xs:sequence>
      <xs:element name="Item" type="test:ItemType" minOccurs="0" maxOccurs="unbounded"/>
    </xs:sequence>
    <xs:attribute name="id" type="xs:integer" use="required"/>
  </xs:complexType>

  <xs:complexType name="ItemType">
    <xs:sequence>
      <xs:element name="Name" type="xs:string"/>
    </xs:sequence>
  </xs:complexType>
</xs:schema>"""

SIMPLE_TYPES_XSD = b"""<?xml version="1.0" encoding="UTF-8"?>
<xs:schema
  xmlns:xs="http://www.w3.org/2001/XMLSchema"
  xmlns:test="http://example.com/test"
  targetNamespace="http://example.com/test">

  <xs:simpleType name="AmountType">
    <xs:restriction base="xs:decimal">
      <xs:minInclusive value="0"/>
    </xs:restriction>
  </xs:simpleType>

  <xs:simpleType name="PriceType">
    <xs:restriction base="test:AmountType"/>
  </xs:simpleType>

  <xs:simpleType name="DiscountPriceType">
    <xs:restriction base="test:PriceType"/>
  </xs:simpleType>

  <xs:simpleType name="PriceListType">
    <xs:list itemType="test:PriceType"/>
  </xs:simpleType>

  <xs:simpleType name="SizeType">
    <xs:union memberTypes="xs:int test:PriceType"/>
  </xs:simpleType>

  <xs:simpleType name="CodeListType">
    <xs:list>
      <xs:simpleType>
        <xs:restriction base="xs:token"/>
      </xs:simpleType>
    </xs:list>
  </xs:simpleType>

  <xs:complexType name="MeasureType">
    <xs:simpleContent>
      <xs:extension base="test:AmountType">
        <xs:attribute name="unit" type="xs:string" use="required"/>
      </xs:extension>
    </xs:simpleContent>
  </xs:complexType>

  <xs:element name="Price" type="test:DiscountPriceType"/>
  <xs:element name="Prices" type="test:PriceListType"/>
  <xs:element name="Size" type="test:SizeType"/>
  <xs:element name="Codes" type="test:CodeListType"/>
  <xs:element name="Weight" type="test:MeasureType"/>
  <xs:element name="Missing" type="test:NoSuchType"/>
  <xs:element name="Anything"/>
</xs:schema>"""

RECURSIVE_XSD = b"""<?xml version="1.0" encoding="UTF-8"?>
<xs:schema
  xmlns:xs="http://www.w3.org/2001/XMLSchema"
  xmlns:test="http://example.com/test"
  targetNamespace="http://example.com/test">

  <xs:element name="Tree" type="test:NodeType"/>

  <xs:complexType name="NodeType">
    <xs:sequence>
      <xs:element name="Label" type="xs:string"/>
      <xs:element name="Node" type="test:NodeType" minOccurs="0" maxOccurs="unbounded"/>
    </xs:sequence>
    <xs:attribute name="depth" type="xs:int"/>
  </xs:complexType>

  <xs:element name="Person" type="test:PersonType"/>

  <xs:complexType name="PersonType">
    <xs:sequence>
      <xs:element name="Name" type="xs:string"/>
      <xs:element name="Employer" type="test:OrganizationType" minOccurs="0"/>
    </xs:sequence>
  </xs:complexType>

  <xs:complexType name="OrganizationType">
    <xs:sequence>
      <xs:element name="Title" type="xs:string"/>
      <xs:element name="Contact" type="test:PersonType" minOccurs="0"/>
    </xs:sequence>
  </xs:complexType>

  <xs:element name="Couple" type="test:CoupleType"/>

  <xs:complexType name="CoupleType">
    <xs:sequence>
      <xs:element name="First" type="test:PersonType"/>
      <xs:element name="Second" type="test:PersonType"/>
    </xs:sequence>
  </xs:complexType>
</xs:schema>"""

INHERITANCE_XSD = b"""<?xml version="1.0" encoding="UTF-8"?>
<xs:schema
  xmlns:xs="http://www.w3.org/2001/XMLSchema"
  xmlns:test="http://example.com/test"
  targetNamespace="http://example.com/test">

  <xs:attributeGroup name="AuditAttributes">
    <xs:attribute name="createdBy" type="xs:string"/>
    <xs:attributeGroup ref="test:VersionAttributes"/>
  </xs:attributeGroup>

  <xs:attributeGroup name="VersionAttributes">
    <xs:attribute name="version" type="xs:int" use="required"/>
    <xs:attributeGroup ref="test:AuditAttributes"/>
  </xs:attributeGroup>

  <xs:complexType name="BaseType">
    <xs:sequence>
      <xs:element name="Id" type="xs:string"/>
      <xs:element name="Note" type="xs:string" minOccurs="0"/>
    </xs:sequence>
    <xs:attribute name="lang" type="xs:language"/>
    <xs:attribute name="status" type="xs:string"/>
    <xs:attributeGroup ref="test:AuditAttributes"/>
  </xs:complexType>

  <xs:complexType name="DerivedType">
    <xs:complexContent>
      <xs:extension base="test:BaseType">
        <xs:sequence>
          <xs:element name="Note" type="xs:integer" maxOccurs="5"/>
          <xs:element name="Extra" type="xs:boolean"/>
        </xs:sequence>
        <xs:attribute name="status" type="xs:token" use="required"/>
      </xs:extension>
    </xs:complexContent>
  </xs:complexType>

  <xs:complexType name="RestrictedType">
    <xs:complexContent>
      <xs:restriction base="test:BaseType">
        <xs:sequence>
          <xs:element name="Id" type="xs:string"/>
          <xs:element name="Note" type="xs:string" minOccurs="0" maxOccurs="0"/>
        </xs:sequence>
        <xs:attribute name="lang" use="prohibited"/>
      </xs:restriction>
    </xs:complexContent>
  </xs:complexType>

  <xs:complexType name="EmptyType"/>

  <xs:element name="Base" type="test:BaseType"/>
  <xs:element name="Derived" type="test:DerivedType"/>
  <xs:element name="Restricted" type="test:RestrictedType"/>
  <xs:element name="Empty" type="test:EmptyType"/>
</xs:schema>"""

GROUPS_XSD = b"""<?xml version="1.0" encoding="UTF-8"?>
<xs:schema
  xmlns:xs="http://www.w3.org/2001/XMLSchema"
  xmlns:test="http://example.com/test"
  targetNamespace="http://example.com/test">

  <xs:group name="AddressGroup">
    <xs:sequence>
      <xs:element name="Street" type="xs:string"/>
      <xs:element name="City" type="xs:string"/>
    </xs:sequence>
  </xs:group>

  <xs:group name="LoopGroup">
    <xs:sequence>
      <xs:element name="Looped" type="xs:string"/>
      <xs:group ref="test:LoopGroup"/>
    </xs:sequence>
  </xs:group>

  <xs:element name="Email" type="xs:string"/>

  <xs:element name="Contact">
    <xs:complexType>
      <xs:sequence>
        <xs:choice>
          <xs:element ref="test:Email"/>
          <xs:element name="Phone" type="xs:string" maxOccurs="3"/>
        </xs:choice>
        <xs:group ref="test:AddressGroup" minOccurs="0"/>
        <xs:element ref="test:Undeclared"/>
        <xs:any namespace="##other" processContents="lax"/>
      </xs:sequence>
    </xs:complexType>
  </xs:element>

  <xs:element name="Settings">
    <xs:complexType>
      <xs:all>
        <xs:element name="Theme" type="xs:string" minOccurs="0"/>
        <xs:element name="Locale" type="xs:language"/>
      </xs:all>
    </xs:complexType>
  </xs:element>

  <xs:element name="Loop">
    <xs:complexType>
      <xs:group ref="test:LoopGroup"/>
    </xs:complexType>
  </xs:element>

  <xs:element name="Reading">
    <xs:complexType>
      <xs:choice>
        <xs:element name="V" type="xs:string"/>
        <xs:element name="V" type="xs:int"/>
      </xs:choice>
    </xs:complexType>
  </xs:element>
</xs:schema>"""

MAIN_WITH_INCLUDE_XSD = b"""<?xml version="1.0" encoding="UTF-8"?>
<xs:schema
  xmlns:xs="http://www.w3.org/2001/XMLSchema"
  xmlns:test="http://example.com/test"
  xmlns:common="http://example.com/common"
  targetNamespace="http://example.com/test">

  <xs:include schemaLocation="parts/chameleon.xsd"/>
  <xs:import namespace="http://example.com/common" schemaLocation="common/common.xsd"/>

  <xs:element name="Shipment">
    <xs:complexType>
      <xs:sequence>
        <xs:element name="Code" type="test:CodeType"/>
        <xs:element name="Address" type="common:AddressType"/>
      </xs:sequence>
    </xs:complexType>
  </xs:element>
</xs:schema>"""

CHAMELEON_XSD = b"""<?xml version="1.0" encoding="UTF-8"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">
  <xs:simpleType name="CodeType">
    <xs:restriction base="xs:NMTOKEN"/>
  </xs:simpleType>
</xs:schema>"""

COMMON_XSD = b"""<?xml version="1.0" encoding="UTF-8"?>
<xs:schema
  xmlns:xs="http://www.w3.org/2001/XMLSchema"
  xmlns:common="http://example.com/common"
  targetNamespace="http://example.com/common">

  <xs:complexType name="AddressType">
    <xs:sequence>
      <xs:element name="Line" type="xs:string" maxOccurs="2"/>
      <xs:element name="PostalCode" type="common:PostalCodeType"/>
    </xs:sequence>
  </xs:complexType>

  <xs:simpleType name="PostalCodeType">
    <xs:restriction base="xs:string"/>
  </xs:simpleType>
</xs:schema>"""

REDEFINE_BASE_XSD = b"""<?xml version="1.0" encoding="UTF-8"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">
  <xs:simpleType name="StatusType">
    <xs:restriction base="xs:string"/>
  </xs:simpleType>
  <xs:element name="Status" type="StatusType"/>
</xs:schema>"""

REDEFINE_XSD = b"""<?xml version="1.0" encoding="UTF-8"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">
  <xs:redefine schemaLocation="base.xsd">
    <xs:simpleType name="StatusType">
      <xs:restriction base="xs:token"/>
    </xs:simpleType>
  </xs:redefine>
</xs:schema>"""

NOT_A_SCHEMA_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<catalog><book/></catalog>"""

MALFORMED_XSD = b"""<?xml version="1.0" encoding="UTF-8"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">
  <xs:element name="Broken">
</xs:schema>"""

ENTITY_BOMB_XSD = b"""<?xml version="1.0"?>
<!DOCTYPE schema [
  <!ENTITY a "aaaaaaaaaa">
  <!ENTITY b "&a;&a;&a;&a;&a;&a;&a;&a;&a;&a;">
]>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">
  <xs:element name="Bomb" type="xs:string"/>
  <xs:annotation><xs:documentation>&b;</xs:documentation></xs:annotation>
</xs:schema>"""

BAD_OCCURS_XSD = b"""<?xml version="1.0" encoding="UTF-8"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">
  <xs:element name="Root">
    <xs:complexType>
      <xs:sequence>
        <xs:element name="Child" type="xs:string" maxOccurs="many"/>
      </xs:sequence>
    </xs:complexType>
  </xs:element>
</xs:schema>"""


def load_graph(content: bytes, filename: str = "test.xsd") -> SchemaGraph:
    """Build a schema graph from a single in-memory document."""
    return build_schema_graph({filename: content}, filename)
