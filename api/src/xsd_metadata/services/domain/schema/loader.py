#!/usr/bin/env python3
"""Load XSD documents into a SchemaGraph.

Documents are parsed with defusedxml (entity expansion and external DTD access
are rejected). ElementTree drops xmlns attributes, so namespace declarations are
captured from ``start-ns`` parse events and kept per element scope; QName-valued
attributes (type, base, ref, itemType, memberTypes) are resolved against the
scope of the element that carries them.

``include``, ``import``, ``redefine`` and ``override`` links are followed through
a locator: in-memory uploads match schemaLocation against the uploaded file
names, on-disk loading resolves it relative to the referencing document. Remote
locations are never fetched.
"""

import io
import logging
import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional
from xml.etree.ElementTree import Element

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

from ....core.config import metadata_config
from .graph import (
    UNBOUNDED,
    XS,
    AttributeDeclaration,
    AttributeGroupDefinition,
    AttributeGroupRef,
    AttributeItem,
    AttributeUse,
    AttributeUseKind,
    ComplexTypeDefinition,
    ContentKind,
    Derivation,
    ElementDeclaration,
    ElementParticle,
    GroupRefParticle,
    MaxOccurs,
    ModelGroup,
    ModelGroupDefinition,
    Particle,
    ParticleKind,
    QName,
    SchemaGraph,
    SimpleTypeDefinition,
    TypeDefinition,
    WildcardParticle,
)

logger = logging.getLogger(__name__)

LINK_TAGS = {"include", "import", "redefine", "override"}
CHAMELEON_LINKS = {"include", "redefine", "override"}
MODEL_GROUP_KINDS = {
    "sequence": ParticleKind.SEQUENCE,
    "choice": ParticleKind.CHOICE,
    "all": ParticleKind.ALL,
}
REMOTE_PREFIXES = ("http://", "https://", "ftp://")

# (schemaLocation, referencing document name) -> (resolved document name, content)
Locator = Callable[[str, str], Optional[tuple[str, bytes]]]


class SchemaLoadError(Exception):
    """Raised when schema documents cannot be parsed into a graph."""
    pass


def _local(tag: str) -> str:
    """Local part of a Clark-notation tag; '' for comments and PIs."""
    if not isinstance(tag, str):
        return ""
    return tag.split("}", 1)[1] if tag.startswith("{") else tag


def _is_xs(elem: Element, local_name: str) -> bool:
    return elem.tag == f"{XS}{local_name}"


def _xs_children(elem: Element) -> list[Element]:
    """Schema children of ``elem`` excluding annotations."""
    return [
        child for child in elem
        if isinstance(child.tag, str) and child.tag.startswith(XS) and not _is_xs(child, "annotation")
    ]


def _parse_document(content: bytes, source_name: str) -> tuple[Element, dict[int, dict[str, str]]]:
    """Parse XML, returning the root element and the namespace scope of every element.

    Raises:
        SchemaLoadError: If the document is malformed or uses forbidden constructs
    """
    scopes: dict[int, dict[str, str]] = {}
    stack: list[dict[str, str]] = [{}]
    pending: dict[str, str] = {}
    root = None

    try:
        for event, item in ET.iterparse(io.BytesIO(content), events=("start-ns", "start", "end")):
            if event == "start-ns":
                prefix, uri = item
                pending[prefix or ""] = uri
            elif event == "start":
                ns_map = {**stack[-1], **pending} if pending else stack[-1]
                pending = {}
                stack.append(ns_map)
                scopes[id(item)] = ns_map
                if root is None:
                    root = item
            else:
                stack.pop()
    except ET.ParseError as e:
        raise SchemaLoadError(f"Invalid XML in {source_name}: {e}") from e
    except DefusedXmlException as e:
        raise SchemaLoadError(f"Forbidden XML construct in {source_name}: {e!r}") from e

    if root is None or not _is_xs(root, "schema"):
        tag = root.tag if root is not None else None
        raise SchemaLoadError(f"Root element of {source_name} is not xs:schema: {tag}")

    return root, scopes


@dataclass
class _DocumentContext:
    """Per-document state used while converting elements to graph objects."""
    source_name: str
    target_namespace: str
    scopes: dict[int, dict[str, str]]
    chameleon: bool = False
    links: list[tuple[str, str]] = field(default_factory=list)  # (kind, schemaLocation)

    def qname(self, elem: Element, attr: str) -> Optional[QName]:
        """Resolve a QName-valued attribute of ``elem``."""
        value = elem.attrib.get(attr)
        if not value:
            return None
        return self.resolve(elem, value.strip())

    def resolve(self, elem: Element, value: str) -> QName:
        ns_map = self.scopes.get(id(elem), {})
        if ":" in value:
            prefix, local = value.split(":", 1)
            namespace = ns_map.get(prefix)
            if namespace is None:
                logger.warning(f"Undeclared prefix '{prefix}' in '{value}' ({self.source_name})")
                namespace = ""
        else:
            local = value
            namespace = ns_map.get("", "")

        # Chameleon include: no-namespace references adopt the including namespace
        if self.chameleon and namespace == "":
            namespace = self.target_namespace
        return QName(namespace, local)


def _parse_occurs(elem: Element, ctx: _DocumentContext) -> tuple[int, MaxOccurs]:
    raw_min = elem.attrib.get("minOccurs", "1").strip()
    raw_max = elem.attrib.get("maxOccurs", "1").strip()
    try:
        min_occurs = int(raw_min)
        max_occurs = UNBOUNDED if raw_max == UNBOUNDED else int(raw_max)
    except ValueError as e:
        raise SchemaLoadError(
            f"Invalid occurrence bounds minOccurs='{raw_min}' maxOccurs='{raw_max}' in {ctx.source_name}"
        ) from e

    if min_occurs < 0 or (max_occurs != UNBOUNDED and max_occurs < 0):
        raise SchemaLoadError(f"Negative occurrence bound in {ctx.source_name}")
    return min_occurs, max_occurs


class SchemaGraphLoader:
    """Parse XSD documents and index their components into a SchemaGraph."""

    def __init__(
        self,
        locator: Optional[Locator] = None,
        follow_locations: Optional[bool] = None,
        strict: bool = False,
    ):
        self.graph = SchemaGraph()
        self.locator = locator
        self.follow_locations = (
            metadata_config.FOLLOW_SCHEMA_LOCATIONS if follow_locations is None else follow_locations
        )
        self.strict = strict
        self._loaded: set[tuple[str, str]] = set()

    def load(self, source_name: str, content: bytes, chameleon_namespace: Optional[str] = None) -> None:
        """Index one document and, when enabled, the documents it links to."""
        root, scopes = _parse_document(content, source_name)

        target_namespace = root.attrib.get("targetNamespace", "")
        chameleon = not target_namespace and bool(chameleon_namespace)
        if chameleon:
            target_namespace = chameleon_namespace

        key = (source_name, target_namespace)
        if key in self._loaded:
            return
        self._loaded.add(key)
        self.graph.documents.append(source_name)

        ctx = _DocumentContext(source_name, target_namespace, scopes, chameleon)
        logger.debug(f"Indexing {source_name} (targetNamespace='{target_namespace}')")

        redefinitions = []
        for child in _xs_children(root):
            kind = _local(child.tag)
            if kind in LINK_TAGS:
                location = child.attrib.get("schemaLocation")
                if location:
                    ctx.links.append((kind, location))
                elif kind != "import":
                    logger.warning(f"<xs:{kind}> without schemaLocation in {source_name}")
                if kind in ("redefine", "override"):
                    redefinitions.extend(_xs_children(child))
            else:
                self._index_component(child, ctx)

        if self.follow_locations:
            for kind, location in ctx.links:
                self._follow(kind, location, ctx)

        # Redefined components replace the ones loaded from the linked document
        for child in redefinitions:
            self._index_component(child, ctx)

    def _follow(self, kind: str, location: str, ctx: _DocumentContext) -> None:
        located = self.locator(location, ctx.source_name) if self.locator else None
        if located is None:
            message = f"Cannot resolve <xs:{kind}> schemaLocation '{location}' from {ctx.source_name}"
            if self.strict:
                raise SchemaLoadError(message)
            logger.warning(message)
            return

        resolved_name, content = located
        chameleon_namespace = ctx.target_namespace if kind in CHAMELEON_LINKS else None
        self.load(resolved_name, content, chameleon_namespace)

    def _index_component(self, elem: Element, ctx: _DocumentContext) -> None:
        kind = _local(elem.tag)
        name = elem.attrib.get("name")

        if kind == "element":
            self.graph.add_element(self._parse_element(elem, ctx))
        elif kind == "complexType" and name:
            self.graph.add_type(self._parse_complex_type(elem, ctx))
        elif kind == "simpleType" and name:
            self.graph.add_type(self._parse_simple_type(elem, ctx))
        elif kind == "group" and name:
            self.graph.add_group(ModelGroupDefinition(
                name=name,
                namespace=ctx.target_namespace,
                particle=self._first_model_group(elem, ctx),
            ))
        elif kind == "attributeGroup" and name:
            self.graph.add_attribute_group(AttributeGroupDefinition(
                name=name,
                namespace=ctx.target_namespace,
                attributes=self._parse_attribute_items(elem, ctx),
            ))
        elif kind == "attribute" and name:
            self.graph.add_attribute(self._parse_attribute_declaration(elem, ctx))
        elif kind not in ("notation", "defaultOpenContent"):
            logger.debug(f"Ignoring top-level <xs:{kind}> in {ctx.source_name}")

    def _parse_element(self, elem: Element, ctx: _DocumentContext) -> ElementDeclaration:
        name = elem.attrib.get("name")
        if not name:
            raise SchemaLoadError(f"Element declaration without name in {ctx.source_name}")

        return ElementDeclaration(
            name=name,
            namespace=ctx.target_namespace,
            type_ref=ctx.qname(elem, "type"),
            inline_type=self._inline_type(elem, ctx),
        )

    def _inline_type(self, elem: Element, ctx: _DocumentContext) -> Optional[TypeDefinition]:
        for child in _xs_children(elem):
            if _is_xs(child, "complexType"):
                return self._parse_complex_type(child, ctx)
            if _is_xs(child, "simpleType"):
                return self._parse_simple_type(child, ctx)
        return None

    def _parse_simple_type(self, elem: Element, ctx: _DocumentContext) -> SimpleTypeDefinition:
        type_def = SimpleTypeDefinition(
            name=elem.attrib.get("name"),
            namespace=ctx.target_namespace,
            derivation=None,
        )

        for child in _xs_children(elem):
            if _is_xs(child, "restriction"):
                type_def.derivation = Derivation.RESTRICTION
                type_def.base = ctx.qname(child, "base") or self._inline_simple_type(child, ctx)
            elif _is_xs(child, "list"):
                type_def.derivation = Derivation.LIST
                type_def.base = ctx.qname(child, "itemType") or self._inline_simple_type(child, ctx)
            elif _is_xs(child, "union"):
                type_def.derivation = Derivation.UNION
                member_types = child.attrib.get("memberTypes", "").split()
                type_def.member_types = [ctx.resolve(child, member) for member in member_types]
                type_def.member_types.extend(
                    self._parse_simple_type(member, ctx)
                    for member in _xs_children(child) if _is_xs(member, "simpleType")
                )

        return type_def

    def _inline_simple_type(self, elem: Element, ctx: _DocumentContext) -> Optional[SimpleTypeDefinition]:
        for child in _xs_children(elem):
            if _is_xs(child, "simpleType"):
                return self._parse_simple_type(child, ctx)
        return None

    def _parse_complex_type(self, elem: Element, ctx: _DocumentContext) -> ComplexTypeDefinition:
        type_def = ComplexTypeDefinition(
            name=elem.attrib.get("name"),
            namespace=ctx.target_namespace,
        )

        content_holder = elem
        for child in _xs_children(elem):
            if _is_xs(child, "complexContent") or _is_xs(child, "simpleContent"):
                simple = _is_xs(child, "simpleContent")

                for derivation in _xs_children(child):
                    if _is_xs(derivation, "extension"):
                        type_def.content = ContentKind.SIMPLE_EXTENSION if simple else ContentKind.COMPLEX_EXTENSION
                    elif _is_xs(derivation, "restriction"):
                        type_def.content = (
                            ContentKind.SIMPLE_RESTRICTION if simple else ContentKind.COMPLEX_RESTRICTION
                        )
                    else:
                        continue
                    type_def.base = ctx.qname(derivation, "base")
                    content_holder = derivation
                    break

        if type_def.content not in (ContentKind.SIMPLE_EXTENSION, ContentKind.SIMPLE_RESTRICTION):
            type_def.particle = self._first_particle(content_holder, ctx)
        type_def.attributes = self._parse_attribute_items(content_holder, ctx)
        return type_def

    def _first_particle(self, elem: Element, ctx: _DocumentContext) -> Optional[Particle]:
        """The content-model particle directly under a complexType or derivation element."""
        for child in _xs_children(elem):
            kind = _local(child.tag)
            if kind in MODEL_GROUP_KINDS or kind == "group":
                return self._parse_particle(child, ctx)
        return None

    def _first_model_group(self, elem: Element, ctx: _DocumentContext) -> Optional[ModelGroup]:
        for child in _xs_children(elem):
            if _local(child.tag) in MODEL_GROUP_KINDS:
                return self._parse_particle(child, ctx)
        return None

    def _parse_particle(self, elem: Element, ctx: _DocumentContext) -> Optional[Particle]:
        kind = _local(elem.tag)
        min_occurs, max_occurs = _parse_occurs(elem, ctx)

        if kind == "element":
            ref = ctx.qname(elem, "ref")
            if ref is not None:
                return ElementParticle(ref=ref, min_occurs=min_occurs, max_occurs=max_occurs)
            return ElementParticle(
                declaration=self._parse_element(elem, ctx),
                min_occurs=min_occurs,
                max_occurs=max_occurs,
            )

        if kind in MODEL_GROUP_KINDS:
            members = [self._parse_particle(child, ctx) for child in _xs_children(elem)]
            return ModelGroup(
                kind=MODEL_GROUP_KINDS[kind],
                particles=[member for member in members if member is not None],
                min_occurs=min_occurs,
                max_occurs=max_occurs,
            )

        if kind == "group":
            ref = ctx.qname(elem, "ref")
            if ref is None:
                logger.warning(f"<xs:group> particle without ref in {ctx.source_name}")
                return None
            return GroupRefParticle(ref=ref, min_occurs=min_occurs, max_occurs=max_occurs)

        if kind == "any":
            return WildcardParticle(min_occurs=min_occurs, max_occurs=max_occurs)

        logger.debug(f"Ignoring <xs:{kind}> inside content model in {ctx.source_name}")
        return None

    def _parse_attribute_items(self, elem: Element, ctx: _DocumentContext) -> list[AttributeItem]:
        items: list[AttributeItem] = []
        for child in _xs_children(elem):
            if _is_xs(child, "attribute"):
                use = child.attrib.get("use", AttributeUseKind.OPTIONAL.value)
                try:
                    use_kind = AttributeUseKind(use)
                except ValueError as e:
                    raise SchemaLoadError(f"Invalid attribute use '{use}' in {ctx.source_name}") from e

                ref = ctx.qname(child, "ref")
                if ref is not None:
                    items.append(AttributeUse(ref=ref, use=use_kind))
                elif child.attrib.get("name"):
                    items.append(AttributeUse(
                        declaration=self._parse_attribute_declaration(child, ctx),
                        use=use_kind,
                    ))
            elif _is_xs(child, "attributeGroup"):
                ref = ctx.qname(child, "ref")
                if ref is not None:
                    items.append(AttributeGroupRef(ref=ref))
        return items

    def _parse_attribute_declaration(self, elem: Element, ctx: _DocumentContext) -> AttributeDeclaration:
        return AttributeDeclaration(
            name=elem.attrib["name"],
            namespace=ctx.target_namespace,
            type_ref=ctx.qname(elem, "type"),
            inline_type=self._inline_simple_type(elem, ctx),
        )


def _normalize(path: str) -> str:
    return posixpath.normpath(path.replace("\\", "/"))


def memory_locator(xsd_files: dict[str, bytes]) -> Locator:
    """Locator over uploaded documents keyed by relative path.

    schemaLocation is first joined with the referencing document's directory;
    if no upload has that path, any upload with the same basename is used.
    """
    by_path = {_normalize(name): name for name in xsd_files}

    def locate(location: str, source_name: str) -> Optional[tuple[str, bytes]]:
        normalized_location = location.replace("\\", "/")
        base_dir = posixpath.dirname(_normalize(source_name))
        candidate = _normalize(posixpath.join(base_dir, normalized_location))

        name = by_path.get(candidate) or by_path.get(_normalize(normalized_location))
        if name is None:
            basename = posixpath.basename(normalized_location)
            name = next(
                (original for path, original in by_path.items() if posixpath.basename(path) == basename),
                None,
            )
        if name is None:
            return None
        return name, xsd_files[name]

    return locate


def file_locator(location: str, source_name: str) -> Optional[tuple[str, bytes]]:
    """Locator resolving schemaLocation relative to the referencing file on disk."""
    if location.startswith(REMOTE_PREFIXES):
        logger.info(f"Not fetching remote schema location '{location}'")
        return None

    path = (Path(source_name).parent / location).resolve()
    if not path.is_file():
        return None
    return str(path), path.read_bytes()


def build_schema_graph(
    xsd_files: dict[str, bytes],
    primary_filename: Optional[str] = None,
    strict: bool = False,
) -> SchemaGraph:
    """Build a schema graph from in-memory XSD documents.

    Args:
        xsd_files: Dictionary mapping relative paths to XSD content
        primary_filename: Document to start from; all documents are indexed when omitted
        strict: Raise instead of logging when a schemaLocation cannot be resolved

    Returns:
        SchemaGraph over the loaded documents

    Raises:
        SchemaLoadError: If a document is malformed or the primary file is missing
    """
    if primary_filename is not None and primary_filename not in xsd_files:
        raise SchemaLoadError(f"Primary schema '{primary_filename}' not among provided files")

    loader = SchemaGraphLoader(locator=memory_locator(xsd_files), strict=strict)
    roots = [primary_filename] if primary_filename is not None else list(xsd_files)
    for name in roots:
        loader.load(name, xsd_files[name])

    logger.info(f"Loaded schema graph: {loader.graph.summary()}")
    return loader.graph


def load_schema_graph(xsd_path: Path, strict: bool = False) -> SchemaGraph:
    """Build a schema graph from an XSD file on disk, following its schema links.

    Raises:
        SchemaLoadError: If the file is missing or any loaded document is malformed
    """
    xsd_path = Path(xsd_path)
    if not xsd_path.is_file():
        raise SchemaLoadError(f"XSD not found: {xsd_path}")

    loader = SchemaGraphLoader(locator=file_locator, strict=strict)
    loader.load(str(xsd_path.resolve()), xsd_path.read_bytes())

    logger.info(f"Loaded schema graph from {xsd_path}: {loader.graph.summary()}")
    return loader.graph
