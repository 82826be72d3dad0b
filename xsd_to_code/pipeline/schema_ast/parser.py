"""
Streaming XSD walker.

Reads a schema document as a stream of start/end events and builds its
prototype tree: the ordered list of top-level schema nodes that a code
backend turns into source. Type references are resolved as they are met,
parsing imported files on demand through the shared ``ParseSession``.
"""

from __future__ import annotations

import dataclasses
import io
import logging
import re
from collections.abc import Callable, Iterator
from pathlib import Path

from lxml import etree

from ...utils import trim_ns_prefix
from ..analyzer.builtin_types import builtin_type
from ..analyzer.type_resolver import TypeResolver
from ..config import ParserConfig
from ..errors import MalformedSchemaError, SchemaIOError, UnresolvedTypeError
from ..hooks import ElementEvent, Hook
from .context import Frame, ParseContext, ParseSession, cache_key
from .nodes import (
    AttributeBuilder,
    AttributeGroupBuilder,
    ComplexTypeBuilder,
    ElementBuilder,
    GroupBuilder,
    SchemaNode,
    SimpleType,
    SimpleTypeBuilder,
    find_base_in_tree,
)

logger = logging.getLogger(__name__)

XSD_NAMESPACE = "http://www.w3.org/2001/XMLSchema"

_XML_DECLARATION = re.compile(r"\A\s*<\?xml\b[^>]*\?>")

Handler = Callable[[ParseContext, ElementEvent, Frame], None]

# Facet tag -> (Restriction field, value parser)
_FACETS: dict[str, tuple[str, Callable[[str], object]]] = {
    "pattern": ("pattern", str),
    "length": ("length", int),
    "minLength": ("min_length", int),
    "maxLength": ("max_length", int),
    "minInclusive": ("min", float),
    "maxInclusive": ("max", float),
    "minExclusive": ("min", float),
    "maxExclusive": ("max", float),
    "fractionDigits": ("precision", int),
    "totalDigits": ("total_digits", int),
}

# Bounds may legally be dates or durations; only numeric ones are kept
_BOUND_FIELDS = frozenset({"min", "max"})


class SchemaParser:
    """Parses XSD files into prototype trees."""

    def __init__(
        self,
        config: ParserConfig | None = None,
        hook: Hook | None = None,
        session: ParseSession | None = None,
    ):
        """
        Initialize the parser.

        Args:
            config: Parser configuration (ignored when ``session`` is given)
            hook: Hook called for every parse event (ignored when ``session`` is given)
            session: Session to share caches with other parsers of the same run
        """
        if session is None:
            session = ParseSession(config=config or ParserConfig(), hook=hook or Hook())
        self.session = session
        self.resolver = TypeResolver(self)

        self._start_handlers: dict[str, Handler] = {
            "schema": self._on_schema,
            "import": self._on_import,
            "include": self._on_include,
            "simpleType": self._on_simple_type,
            "complexType": self._on_complex_type,
            "element": self._on_element,
            "attribute": self._on_attribute,
            "group": self._on_group,
            "attributeGroup": self._on_attribute_group,
            "restriction": self._on_restriction,
            "extension": self._on_extension,
            "list": self._on_list,
            "union": self._on_union,
            "enumeration": self._on_enumeration,
            "sequence": self._on_compositor,
            "choice": self._on_compositor,
            "all": self._on_compositor,
            "any": self._on_any,
        }
        for facet in _FACETS:
            self._start_handlers[facet] = self._on_facet

        self._end_handlers: dict[str, Handler] = {
            "simpleType": self._end_simple_type,
            "complexType": self._end_complex_type,
            "element": self._end_element,
            "attribute": self._end_attribute,
            "group": self._end_group,
            "attributeGroup": self._end_attribute_group,
        }

    @property
    def config(self) -> ParserConfig:
        return self.session.config

    @property
    def hook(self) -> Hook:
        return self.session.hook

    def parse_file(self, path: str | Path, extract: bool = False) -> list[SchemaNode]:
        """
        Parse one schema file.

        In full mode the tree is registered in the session cache before the
        walk starts, so a dependency importing this file back sees the
        partial tree instead of parsing it again. A successful full parse is
        reported to ``session.on_file_parsed``.

        Args:
            path: Schema file to parse
            extract: Harvest types only; never touches other files

        Returns:
            The prototype tree of the file

        Raises:
            SchemaIOError: If the file is missing or is a directory
            MalformedSchemaError: If the file is not well-formed or holds unparseable values
            UnresolvedTypeError: In strict mode, for references to unknown types
        """
        path = Path(path)
        if not path.exists():
            raise SchemaIOError("schema file not found", path=str(path))
        if path.is_dir():
            raise SchemaIOError("expected a schema file, got a directory", path=str(path))

        ctx = ParseContext(file_path=path, extract=extract)
        key = cache_key(path)
        if not extract:
            self.session.parsed_files[key] = ctx.proto_tree

        logger.debug("Parsing %s (%s mode)", path, "extract" if extract else "full")
        try:
            self._run(ctx, str(path))
        except Exception:
            if not extract:
                self.session.parsed_files.pop(key, None)
            raise

        if not extract and self.config.emit and self.session.on_file_parsed is not None:
            self.session.on_file_parsed(path, ctx.proto_tree)
        return ctx.proto_tree

    def extract(self, path: str | Path) -> list[SchemaNode]:
        """Extract-mode parse of ``path``, cached for the rest of the session."""
        key = cache_key(path)
        tree = self.session.extracted_files.get(key)
        if tree is None:
            tree = self.parse_file(path, extract=True)
            self.session.extracted_files[key] = tree
        return tree

    def parse_string(self, text: str, base_dir: str | Path = ".") -> list[SchemaNode]:
        """
        Parse an in-memory schema document.

        Relative ``schemaLocation`` values are resolved against ``base_dir``.
        The result is neither cached nor reported to ``on_file_parsed``.
        The text is already decoded, so an encoding named by its XML
        declaration is ignored.
        """
        ctx = ParseContext(file_path=Path(base_dir) / "<string>")
        source = _XML_DECLARATION.sub("", text, count=1)
        self._run(ctx, io.BytesIO(source.encode("utf-8")))
        return ctx.proto_tree

    def _run(self, ctx: ParseContext, source) -> None:
        for event, elem in self._events(ctx, source):
            if event == "start":
                self._start(ctx, elem)
            else:
                self._end(ctx, elem)
        self._fix_union_members(ctx)
        if self.config.strict and not ctx.extract:
            self._check_unresolved(ctx)

    def _events(self, ctx: ParseContext, source) -> Iterator[tuple[str, etree._Element]]:
        """The tokenizer's start/end events, with its errors mapped to ours."""
        try:
            yield from etree.iterparse(source, events=("start", "end"), remove_comments=True, remove_pis=True)
        except etree.XMLSyntaxError as err:
            raise MalformedSchemaError(str(err), path=str(ctx.file_path)) from err
        except OSError as err:
            raise SchemaIOError(str(err), path=str(ctx.file_path)) from err

    def _start(self, ctx: ParseContext, elem: etree._Element) -> None:
        qname = etree.QName(elem)
        is_schema_tag = qname.namespace in (XSD_NAMESPACE, None)
        # Foreign markup (appinfo payloads...) gets a frame but no handler
        frame = Frame(kind=qname.localname if is_schema_tag else "", depth=len(ctx.frames))
        ctx.frames.push(frame)

        event = self._make_event(elem, qname)
        if not self.hook.on_start_element(ctx, event):
            return
        handler = self._start_handlers.get(frame.kind)
        if handler is not None:
            handler(ctx, event, frame)

    def _end(self, ctx: ParseContext, elem: etree._Element) -> None:
        frame = ctx.frames.peek()

        text = _char_data(elem)
        if text and self.hook.on_char_data(ctx, text):
            _attach_doc(ctx, text)

        event = self._make_event(elem, etree.QName(elem))
        if self.hook.on_end_element(ctx, event):
            handler = self._end_handlers.get(frame.kind)
            if handler is not None:
                handler(ctx, event, frame)

        ctx.frames.pop()
        elem.clear(keep_tail=True)

    @staticmethod
    def _make_event(elem: etree._Element, qname: etree.QName) -> ElementEvent:
        return ElementEvent(
            tag=elem.tag,
            local_name=qname.localname,
            attrib={etree.QName(k).localname: v for k, v in elem.attrib.items()},
            nsmap=dict(elem.nsmap),
            line=elem.sourceline,
        )

    def _resolve(self, ctx: ParseContext, raw_reference: str) -> str:
        return self.resolver.resolve_type(ctx, raw_reference, ctx.proto_tree)

    def _parse_plural(self, ctx: ParseContext, event: ElementEvent, attribute: str = "maxOccurs") -> bool:
        """True when an occurrence bound is ``unbounded`` or an integer above one."""
        value = event.attrib[attribute]
        if value == "unbounded":
            return True
        try:
            return int(value) > 1
        except ValueError as err:
            raise MalformedSchemaError(
                f"invalid {attribute} value {value!r} on {event.local_name}",
                path=str(ctx.file_path),
                element=event.local_name,
                attribute=attribute,
                value=value,
            ) from err

    # Namespaces

    def _on_schema(self, ctx: ParseContext, event: ElementEvent, frame: Frame) -> None:
        ctx.namespaces.register_prefixes(event.nsmap)

    def _on_import(self, ctx: ParseContext, event: ElementEvent, frame: Frame) -> None:
        ctx.namespaces.register_import(event.attrib.get("namespace"), event.attrib.get("schemaLocation"))

    def _on_include(self, ctx: ParseContext, event: ElementEvent, frame: Frame) -> None:
        ctx.namespaces.register_include(event.attrib.get("schemaLocation"))

    # Simple types

    def _on_simple_type(self, ctx: ParseContext, event: ElementEvent, frame: Frame) -> None:
        name = event.attrib.get("name", "")
        builder = SimpleTypeBuilder(name=name, anonymous=not name)
        frame.name = name
        frame.builder = builder

    def _end_simple_type(self, ctx: ParseContext, event: ElementEvent, frame: Frame) -> None:
        builder = frame.builder
        if builder is None:
            return
        resolved = builder.effective_type()
        owner = ctx.parent_frame()
        owner_kind = owner.kind if owner is not None else ""

        if owner_kind in ("element", "attribute"):
            if owner.builder is not None:
                owner.builder.type = resolved
                if builder.is_list:
                    owner.builder.plural = True
        elif owner_kind == "list":
            outer = ctx.enclosing_builder(("simpleType",))
            if outer is not None and not outer.base:
                outer.base = resolved
        elif owner_kind == "restriction":
            target = ctx.enclosing_builder(("simpleType", "complexType"))
            if target is not None and not target.base:
                target.base = resolved
        elif owner_kind == "union":
            union = ctx.enclosing_builder(("simpleType",))
            if union is not None:
                union.member_types[builder.name or resolved] = resolved
                union.restriction.enum.extend(builder.restriction.enum)
        elif builder.name:
            ctx.emit(builder.build())

    def _open_simple_type(self, ctx: ParseContext) -> SimpleTypeBuilder | None:
        """The simple type a restriction-level tag applies to, if it is not in a complex type."""
        owner = ctx.enclosing_builder(("simpleType", "complexType", "element", "attribute"))
        if isinstance(owner, SimpleTypeBuilder):
            return owner
        return None

    def _on_restriction(self, ctx: ParseContext, event: ElementEvent, frame: Frame) -> None:
        base = event.attrib.get("base")
        if not base:
            return
        owner = ctx.enclosing_builder(("simpleType", "complexType"))
        if isinstance(owner, SimpleTypeBuilder):
            owner.base = self._resolve(ctx, base)
            return
        parent = ctx.parent_frame()
        in_content = parent is not None and parent.kind in ("simpleContent", "complexContent")
        if isinstance(owner, ComplexTypeBuilder) and in_content:
            owner.base = self._resolve(ctx, base)

    def _on_extension(self, ctx: ParseContext, event: ElementEvent, frame: Frame) -> None:
        base = event.attrib.get("base")
        if not base:
            return
        owner = ctx.enclosing_builder(("complexType",))
        if owner is not None:
            owner.base = self._resolve(ctx, base)

    def _on_list(self, ctx: ParseContext, event: ElementEvent, frame: Frame) -> None:
        builder = self._open_simple_type(ctx)
        if builder is None:
            return
        builder.is_list = True
        item_type = event.attrib.get("itemType")
        if item_type:
            builder.base = self._resolve(ctx, item_type)

    def _on_union(self, ctx: ParseContext, event: ElementEvent, frame: Frame) -> None:
        builder = self._open_simple_type(ctx)
        if builder is None:
            return
        builder.is_union = True
        for member in event.attrib.get("memberTypes", "").split():
            builder.member_types[trim_ns_prefix(member)] = self._resolve(ctx, member)

    def _on_enumeration(self, ctx: ParseContext, event: ElementEvent, frame: Frame) -> None:
        builder = self._open_simple_type(ctx)
        value = event.attrib.get("value")
        if builder is not None and value is not None:
            builder.restriction.enum.append(value)

    def _on_facet(self, ctx: ParseContext, event: ElementEvent, frame: Frame) -> None:
        builder = self._open_simple_type(ctx)
        value = event.attrib.get("value")
        if builder is None or value is None:
            return
        field_name, convert = _FACETS[event.local_name]
        restriction = builder.restriction

        if field_name == "pattern":
            # Several patterns in one step match if any of them does
            restriction.pattern = f"{restriction.pattern}|{value}" if restriction.pattern else value
            return

        try:
            parsed = convert(value)
        except ValueError as err:
            if field_name in _BOUND_FIELDS:
                logger.debug("Keeping non-numeric %s=%r of %s unset", event.local_name, value, builder.name)
                return
            raise MalformedSchemaError(
                f"invalid {event.local_name} value {value!r}",
                path=str(ctx.file_path),
                element=event.local_name,
                attribute="value",
                value=value,
            ) from err

        setattr(restriction, field_name, parsed)
        if event.local_name == "minExclusive":
            restriction.min_exclusive = True
        elif event.local_name == "maxExclusive":
            restriction.max_exclusive = True

    # Elements and attributes

    def _on_element(self, ctx: ParseContext, event: ElementEvent, frame: Frame) -> None:
        attrib = event.attrib
        builder = ElementBuilder()
        ref = attrib.get("ref")
        if ref:
            builder.name = trim_ns_prefix(ref)
            builder.type = self._resolve(ctx, ref)
        if "name" in attrib:
            builder.name = attrib["name"]
        if "type" in attrib:
            builder.type = self._resolve(ctx, attrib["type"])
        if "maxOccurs" in attrib:
            builder.plural = self._parse_plural(ctx, event)
        if attrib.get("unbounded", "0") != "0":
            builder.plural = True
        builder.optional = attrib.get("minOccurs") == "0"
        builder.nillable = attrib.get("nillable") == "true"
        builder.abstract = attrib.get("abstract") == "true"
        builder.default = attrib.get("default", attrib.get("fixed"))
        builder.plural = builder.plural or ctx.enclosing_compositor_plural()

        frame.name = builder.name
        frame.builder = builder
        frame.attached = self._attach_element(ctx, frame, builder)

    def _attach_element(self, ctx: ParseContext, frame: Frame, builder: ElementBuilder) -> bool:
        """Add an element to the content model it appears in; False for a top-level declaration."""
        container = ctx.enclosing_builder(("complexType", "group"))
        if isinstance(container, ComplexTypeBuilder):
            existing = container.find_element(builder.name, builder.type)
            if existing is not None:
                # Redeclared across a choice: plurality wins
                existing.plural = existing.plural or builder.plural
                frame.builder = existing
            else:
                container.elements.append(builder)
            return True
        if isinstance(container, GroupBuilder):
            container.elements.append(builder)
            return True
        return False

    def _end_element(self, ctx: ParseContext, event: ElementEvent, frame: Frame) -> None:
        builder = frame.builder
        if builder is None:
            return
        if not builder.type:
            builder.type = builtin_type("anyType", self.config.lang)
        if not frame.attached and not builder.inline_complex:
            ctx.emit(builder.build())

    def _on_any(self, ctx: ParseContext, event: ElementEvent, frame: Frame) -> None:
        container = ctx.enclosing_builder(("complexType", "group"))
        if container is None:
            return
        plural = self._parse_plural(ctx, event) if "maxOccurs" in event.attrib else False
        wildcard = ElementBuilder(
            name="any",
            type=builtin_type("anyType", self.config.lang),
            plural=plural or ctx.enclosing_compositor_plural(),
            optional=event.attrib.get("minOccurs") == "0",
            wildcard=True,
        )
        if isinstance(container, ComplexTypeBuilder) and container.find_element(wildcard.name, wildcard.type):
            return
        container.elements.append(wildcard)

    def _on_attribute(self, ctx: ParseContext, event: ElementEvent, frame: Frame) -> None:
        attrib = event.attrib
        builder = AttributeBuilder()
        ref = attrib.get("ref")
        if ref:
            builder.name = trim_ns_prefix(ref)
            builder.type = self._resolve(ctx, ref)
        if "name" in attrib:
            builder.name = attrib["name"]
        if "type" in attrib:
            builder.type = self._resolve(ctx, attrib["type"])
        builder.optional = attrib.get("use") != "required"
        builder.default = attrib.get("default", attrib.get("fixed"))

        frame.name = builder.name
        frame.builder = builder
        container = ctx.enclosing_builder(("complexType", "attributeGroup"))
        if container is not None:
            container.attributes.append(builder)
            frame.attached = True

    def _end_attribute(self, ctx: ParseContext, event: ElementEvent, frame: Frame) -> None:
        builder = frame.builder
        if builder is None:
            return
        if not builder.type:
            builder.type = builtin_type("anySimpleType", self.config.lang)
        if not frame.attached:
            ctx.emit(builder.build())

    # Complex types and groups

    def _on_complex_type(self, ctx: ParseContext, event: ElementEvent, frame: Frame) -> None:
        builder = ComplexTypeBuilder(mixed=event.attrib.get("mixed") == "true")
        parent = ctx.parent_frame()
        if parent is not None and parent.kind == "element" and parent.builder is not None:
            # Inline type: named after the element declaring it
            element = parent.builder
            builder.name = element.name
            builder.anonymous = True
            element.type = element.name
            element.inline_complex = True
        else:
            builder.name = event.attrib.get("name", "")
            if not builder.name:
                last = ctx.enclosing_builder(("element",))
                builder.name = last.name if last is not None else ""
                builder.anonymous = True

        frame.name = builder.name
        frame.builder = builder

    def _end_complex_type(self, ctx: ParseContext, event: ElementEvent, frame: Frame) -> None:
        if frame.builder is None:
            return
        ctx.emit(frame.builder.build())

    def _on_group(self, ctx: ParseContext, event: ElementEvent, frame: Frame) -> None:
        attrib = event.attrib
        builder = GroupBuilder(name=attrib.get("name", ""))
        ref = attrib.get("ref")
        if ref:
            builder.name = trim_ns_prefix(ref)
            builder.ref = self._resolve(ctx, ref)
        if "maxOccurs" in attrib:
            builder.plural = self._parse_plural(ctx, event)
        builder.plural = builder.plural or ctx.enclosing_compositor_plural()
        frame.name = builder.name

        container = ctx.enclosing_builder(("complexType", "group"))
        if isinstance(container, ComplexTypeBuilder):
            if not container.has_group(builder.name):
                container.groups.append(builder)
            frame.attached = True
        elif container is not None:
            # Groups nest within group definitions
            container.groups.append(builder)
            frame.attached = True
        else:
            frame.builder = builder

    def _end_group(self, ctx: ParseContext, event: ElementEvent, frame: Frame) -> None:
        if frame.builder is not None:
            ctx.emit(frame.builder.build())

    def _on_attribute_group(self, ctx: ParseContext, event: ElementEvent, frame: Frame) -> None:
        attrib = event.attrib
        builder = AttributeGroupBuilder(name=attrib.get("name", ""))
        ref = attrib.get("ref")
        if ref:
            builder.name = trim_ns_prefix(ref)
            builder.ref = self._resolve(ctx, ref)
        frame.name = builder.name

        container = ctx.enclosing_builder(("complexType", "attributeGroup"))
        if container is not None:
            container.attribute_groups.append(builder)
            frame.attached = True
            return
        frame.builder = builder

    def _end_attribute_group(self, ctx: ParseContext, event: ElementEvent, frame: Frame) -> None:
        if frame.builder is None:
            return
        ctx.emit(frame.builder.build())

    # Compositors

    def _on_compositor(self, ctx: ParseContext, event: ElementEvent, frame: Frame) -> None:
        plural = self._parse_plural(ctx, event) if "maxOccurs" in event.attrib else False
        frame.plural = plural or ctx.enclosing_compositor_plural()

    # Post-processing

    def _fix_union_members(self, ctx: ParseContext) -> None:
        """
        Resolve union members that referenced types declared later in the file.

        Only named unions are rewritten. An anonymous union has already handed
        its first member to the owning element or attribute when it closed, so
        a forward reference there stays as the bare name; backends look such
        names up in the finished tree.
        """
        for index, node in enumerate(ctx.proto_tree):
            if not isinstance(node, SimpleType) or not node.is_union:
                continue
            members = dict(node.member_types)
            changed = False
            for key, value in members.items():
                if value != key:
                    continue
                found = find_base_in_tree(key, ctx.proto_tree)
                if found:
                    members[key] = found
                    changed = True
            if changed:
                ctx.proto_tree[index] = dataclasses.replace(node, member_types=members)

    def _check_unresolved(self, ctx: ParseContext) -> None:
        known = {node.name for node in ctx.proto_tree} | self.session.known_names()
        for name in ctx.unresolved:
            if name not in known:
                raise UnresolvedTypeError(name, path=str(ctx.file_path))


def _char_data(elem: etree._Element) -> str:
    """Trimmed text directly inside ``elem``: its own text and the tails of its children."""
    parts = [elem.text or ""]
    parts.extend(child.tail or "" for child in elem)
    return "".join(parts).strip()


def _attach_doc(ctx: ParseContext, text: str) -> None:
    """Set ``text`` as the documentation of the innermost open construct."""
    for frame in ctx.frames:
        if frame.kind == "enumeration":
            # Per-value documentation has nowhere to go
            return
        if frame.builder is not None:
            frame.builder.doc = text
            return
