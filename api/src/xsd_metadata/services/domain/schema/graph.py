#!/usr/bin/env python3
"""In-memory schema graph consumed by the metadata tree builder.

The graph holds every global declaration of a loaded schema set, indexed by
qualified name, plus the anonymous definitions reachable from them. References
between declarations stay as ``QName`` values and are resolved on demand through
the lookup methods, so the graph can represent cyclic type structures without
any special handling.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, NamedTuple, Optional, Union

# XSD namespace
XS_NS = "http://www.w3.org/2001/XMLSchema"
XS = f"{{{XS_NS}}}"

# Occurrence sentinel for maxOccurs="unbounded"
UNBOUNDED = "unbounded"

MaxOccurs = Union[int, str]


class QName(NamedTuple):
    """Namespace-qualified name; ``namespace`` is '' for no-namespace schemas."""
    namespace: str
    local: str

    def __str__(self) -> str:
        return f"{{{self.namespace}}}{self.local}" if self.namespace else self.local


ANY_TYPE = QName(XS_NS, "anyType")


class Derivation(str, Enum):
    """How a simple type is derived."""
    RESTRICTION = "restriction"
    LIST = "list"
    UNION = "union"


class ContentKind(str, Enum):
    """Content model shape of a complex type."""
    COMPLEX_EXTENSION = "complex_extension"
    COMPLEX_RESTRICTION = "complex_restriction"
    SIMPLE_EXTENSION = "simple_extension"
    SIMPLE_RESTRICTION = "simple_restriction"
    DIRECT = "direct"  # particle and attributes declared directly on the type


class ParticleKind(str, Enum):
    """Variant tag for content-model particles."""
    ELEMENT = "element"
    SEQUENCE = "sequence"
    CHOICE = "choice"
    ALL = "all"
    GROUP_REF = "group_ref"
    WILDCARD = "wildcard"


class AttributeUseKind(str, Enum):
    OPTIONAL = "optional"
    REQUIRED = "required"
    PROHIBITED = "prohibited"


# Definitions use identity equality so they can serve as recursion-guard keys.

@dataclass(eq=False)
class SimpleTypeDefinition:
    """A named or anonymous xs:simpleType."""
    name: Optional[str]
    namespace: str
    derivation: Optional[Derivation]
    base: Optional["TypeRef"] = None        # restriction base or list item type
    member_types: list["TypeRef"] = field(default_factory=list)  # union members

    @property
    def qname(self) -> Optional[QName]:
        return QName(self.namespace, self.name) if self.name else None


@dataclass(eq=False)
class ComplexTypeDefinition:
    """A named or anonymous xs:complexType."""
    name: Optional[str]
    namespace: str
    content: ContentKind = ContentKind.DIRECT
    base: Optional[QName] = None
    particle: Optional["Particle"] = None
    attributes: list["AttributeItem"] = field(default_factory=list)

    @property
    def qname(self) -> Optional[QName]:
        return QName(self.namespace, self.name) if self.name else None


TypeDefinition = Union[SimpleTypeDefinition, ComplexTypeDefinition]
TypeRef = Union[QName, SimpleTypeDefinition, ComplexTypeDefinition]


@dataclass(eq=False)
class ElementDeclaration:
    """A global or local xs:element declaration."""
    name: str
    namespace: str
    type_ref: Optional[QName] = None
    inline_type: Optional[TypeDefinition] = None

    @property
    def qname(self) -> QName:
        return QName(self.namespace, self.name)


@dataclass(eq=False)
class AttributeDeclaration:
    """A global or local xs:attribute declaration."""
    name: str
    namespace: str
    type_ref: Optional[QName] = None
    inline_type: Optional[SimpleTypeDefinition] = None


@dataclass(eq=False)
class AttributeUse:
    """An attribute as used inside a complex type or attribute group."""
    declaration: Optional[AttributeDeclaration] = None
    ref: Optional[QName] = None
    use: AttributeUseKind = AttributeUseKind.OPTIONAL


@dataclass(eq=False)
class AttributeGroupRef:
    ref: QName


AttributeItem = Union[AttributeUse, AttributeGroupRef]


@dataclass(eq=False)
class AttributeGroupDefinition:
    name: str
    namespace: str
    attributes: list[AttributeItem] = field(default_factory=list)


# Particles. Every variant carries its kind tag and the occurrence bounds stated
# at its position in the content model.

@dataclass(eq=False)
class ElementParticle:
    declaration: Optional[ElementDeclaration] = None  # local declaration
    ref: Optional[QName] = None                       # or a reference to a global one
    min_occurs: int = 1
    max_occurs: MaxOccurs = 1
    kind: ParticleKind = field(default=ParticleKind.ELEMENT, init=False)


@dataclass(eq=False)
class ModelGroup:
    """xs:sequence, xs:choice or xs:all."""
    kind: ParticleKind
    particles: list["Particle"] = field(default_factory=list)
    min_occurs: int = 1
    max_occurs: MaxOccurs = 1


@dataclass(eq=False)
class GroupRefParticle:
    ref: QName
    min_occurs: int = 1
    max_occurs: MaxOccurs = 1
    kind: ParticleKind = field(default=ParticleKind.GROUP_REF, init=False)


@dataclass(eq=False)
class WildcardParticle:
    min_occurs: int = 1
    max_occurs: MaxOccurs = 1
    kind: ParticleKind = field(default=ParticleKind.WILDCARD, init=False)


Particle = Union[ElementParticle, ModelGroup, GroupRefParticle, WildcardParticle]


@dataclass(eq=False)
class ModelGroupDefinition:
    """A named xs:group."""
    name: str
    namespace: str
    particle: Optional[ModelGroup] = None


class SchemaGraph:
    """Read-only index over the declarations of a loaded schema set."""

    def __init__(self):
        self.types: dict[QName, TypeDefinition] = {}
        self.elements: dict[QName, ElementDeclaration] = {}
        self.attributes: dict[QName, AttributeDeclaration] = {}
        self.groups: dict[QName, ModelGroupDefinition] = {}
        self.attribute_groups: dict[QName, AttributeGroupDefinition] = {}
        self.documents: list[str] = []

    def global_elements(self) -> Iterator[ElementDeclaration]:
        """Yield global element declarations in document order."""
        yield from self.elements.values()

    def get_type(self, qname: Optional[QName]) -> Optional[TypeDefinition]:
        if qname is None:
            return None
        return self.types.get(qname)

    def get_element(self, qname: Optional[QName]) -> Optional[ElementDeclaration]:
        if qname is None:
            return None
        return self.elements.get(qname)

    def get_attribute(self, qname: Optional[QName]) -> Optional[AttributeDeclaration]:
        if qname is None:
            return None
        return self.attributes.get(qname)

    def get_group(self, qname: Optional[QName]) -> Optional[ModelGroupDefinition]:
        if qname is None:
            return None
        return self.groups.get(qname)

    def get_attribute_group(self, qname: Optional[QName]) -> Optional[AttributeGroupDefinition]:
        if qname is None:
            return None
        return self.attribute_groups.get(qname)

    @staticmethod
    def is_reserved_namespace(namespace_uri: Optional[str]) -> bool:
        """True for the XML Schema namespace itself."""
        return namespace_uri == XS_NS

    def is_builtin(self, qname: Optional[QName]) -> bool:
        return qname is not None and self.is_reserved_namespace(qname.namespace)

    def add_type(self, type_def: TypeDefinition) -> None:
        self.types[type_def.qname] = type_def

    def add_element(self, element: ElementDeclaration) -> None:
        self.elements[element.qname] = element

    def add_attribute(self, attribute: AttributeDeclaration) -> None:
        self.attributes[QName(attribute.namespace, attribute.name)] = attribute

    def add_group(self, group: ModelGroupDefinition) -> None:
        self.groups[QName(group.namespace, group.name)] = group

    def add_attribute_group(self, group: AttributeGroupDefinition) -> None:
        self.attribute_groups[QName(group.namespace, group.name)] = group

    def summary(self) -> dict[str, int]:
        return {
            "documents": len(self.documents),
            "types": len(self.types),
            "elements": len(self.elements),
            "attributes": len(self.attributes),
            "groups": len(self.groups),
            "attribute_groups": len(self.attribute_groups),
        }
