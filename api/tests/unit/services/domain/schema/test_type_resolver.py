#!/usr/bin/env python3

import pytest

from xsd_metadata.services.domain.schema import QName, SchemaGraph, TypeResolver
from xsd_metadata.services.domain.schema.graph import (
    XS_NS,
    ComplexTypeDefinition,
    ContentKind,
    Derivation,
    SimpleTypeDefinition,
)

from tests.fixtures.xsd_fixtures import SIMPLE_TYPES_XSD, TEST_NS, load_graph


@pytest.mark.unit
class TestTypeResolver:
    """Test suite for resolving type references to primitive labels"""

    @pytest.fixture
    def resolver(self):
        return TypeResolver(load_graph(SIMPLE_TYPES_XSD))

    def test_builtin_label(self, resolver):
        assert resolver.resolve(QName(XS_NS, "string")) == "xs:string"
        assert resolver.resolve(QName(XS_NS, "dateTime")) == "xs:dateTime"

    def test_restriction_chain(self, resolver):
        """Restriction chains collapse to the built-in they bottom out in"""
        assert resolver.resolve(QName(TEST_NS, "AmountType")) == "xs:decimal"
        assert resolver.resolve(QName(TEST_NS, "DiscountPriceType")) == "xs:decimal"

    def test_list_type(self, resolver):
        assert resolver.resolve(QName(TEST_NS, "PriceListType")) == "list of xs:decimal"

    def test_list_of_anonymous_item_type(self, resolver):
        assert resolver.resolve(QName(TEST_NS, "CodeListType")) == "list of xs:token"

    def test_union_type(self, resolver):
        """Union members are not resolved individually"""
        assert resolver.resolve(QName(TEST_NS, "SizeType")) == "union"

    def test_simple_content_complex_type(self, resolver):
        """Complex types with simple content resolve through their base"""
        assert resolver.resolve(QName(TEST_NS, "MeasureType")) == "xs:decimal"

    def test_unknown_reference(self, resolver):
        assert resolver.resolve(QName(TEST_NS, "NoSuchType")) == "unknown"

    def test_none_reference(self, resolver):
        assert resolver.resolve(None) is None

    def test_inline_definition(self, resolver):
        """Inline definitions are resolved directly"""
        inline = SimpleTypeDefinition(
            name=None,
            namespace=TEST_NS,
            derivation=Derivation.RESTRICTION,
            base=QName(TEST_NS, "PriceType"),
        )
        assert resolver.resolve(inline) == "xs:decimal"

    def test_complex_type_falls_back_to_name(self):
        """A complex type without simple content keeps its own name"""
        graph = SchemaGraph()
        graph.add_type(ComplexTypeDefinition(name="AddressType", namespace=TEST_NS))

        resolver = TypeResolver(graph)

        assert resolver.resolve(QName(TEST_NS, "AddressType")) == "AddressType"

    def test_anonymous_definition_without_derivation(self):
        resolver = TypeResolver(SchemaGraph())
        anonymous = ComplexTypeDefinition(name=None, namespace=TEST_NS, content=ContentKind.DIRECT)

        assert resolver.resolve(anonymous) == "unknown"
