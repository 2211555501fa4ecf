"""
C# Script Analyzer
Parses Unity .cs files to extract MonoBehaviour/ScriptableObject classes
and the fields Unity serializes for them.
Works completely offline - no Unity required.
"""

import logging
import threading
from pathlib import Path
from types import MappingProxyType
from dataclasses import dataclass, field
from typing import Callable, Iterator, Mapping, Optional

from tree_sitter import Node, Parser
from tree_sitter_language_pack import get_language

logger = logging.getLogger(__name__)


@dataclass
class CSField:
    name: str
    type: str
    modifiers: list[str] = field(default_factory=list)
    attributes: list[str] = field(default_factory=list)
    line: int = 0

    @property
    def is_public(self) -> bool:
        return "public" in self.modifiers

    @property
    def is_serialized(self) -> bool:
        """Public or [SerializeField], and never [NonSerialized]."""
        if any(CSharpParser.NON_SERIALIZED_MARKER in a for a in self.attributes):
            return False
        return self.is_public or any(
            CSharpParser.SERIALIZE_MARKER in a for a in self.attributes
        )


@dataclass
class CSClass:
    name: str
    bases: list[str] = field(default_factory=list)
    fields: list[CSField] = field(default_factory=list)
    line: int = 0

    @property
    def is_unity_object(self) -> bool:
        return any(b in CSharpParser.UNITY_BASE_CLASSES for b in self.bases)


@dataclass
class CSFile:
    path: str
    classes: list[CSClass] = field(default_factory=list)
    has_errors: bool = False

    @property
    def unity_classes(self) -> list[CSClass]:
        return [c for c in self.classes if c.is_unity_object]

    @property
    def serialized_fields(self) -> dict[str, str]:
        """Field name -> declared type over every Unity class, first one wins."""
        fields: dict[str, str] = {}
        for cs_class in self.unity_classes:
            for cs_field in cs_class.fields:
                if cs_field.is_serialized:
                    fields.setdefault(cs_field.name, cs_field.type)
        return fields


@dataclass(frozen=True)
class ScriptSchema:
    guid: str
    path: str
    relative_path: str
    class_names: tuple[str, ...] = ()
    serialized_fields: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(
            self, "serialized_fields", MappingProxyType(dict(self.serialized_fields))
        )

    def to_dict(self) -> dict:
        return {
            "guid": self.guid,
            "path": self.relative_path,
            "classes": list(self.class_names),
            "serialized_fields": dict(self.serialized_fields),
        }


class CSharpParser:
    """Parse C# files for Unity serialization analysis."""

    # Direct base types that make a class a Unity script component.
    # Matched against the literal base-list text, one hop only.
    UNITY_BASE_CLASSES = frozenset({"MonoBehaviour", "ScriptableObject"})
    SERIALIZE_MARKER = "SerializeField"
    NON_SERIALIZED_MARKER = "NonSerialized"

    _local = threading.local()

    @classmethod
    def _get_parser(cls) -> Parser:
        """Parser instances are not thread-safe, so keep one per thread."""
        parser = getattr(cls._local, "parser", None)
        if parser is None:
            parser = Parser(get_language("csharp"))
            cls._local.parser = parser
        return parser

    def parse_file(self, path: str | Path) -> CSFile:
        """Parse a .cs file and return structured data."""
        path = Path(path)
        content = path.read_text(encoding='utf-8-sig')
        return self.parse_content(content, str(path))

    def parse_content(self, content: str, path: str = "") -> CSFile:
        """Parse C# source text."""
        tree = self._get_parser().parse(content.encode("utf-8"))
        root = tree.root_node

        cs_file = CSFile(path=path, has_errors=root.has_error)
        if root.has_error:
            logger.debug("Syntax errors in %s, extracting what parsed", path or "<string>")

        for class_node in self._iter_class_nodes(root):
            cs_file.classes.append(self._parse_class(class_node))

        return cs_file

    def collect_fields(
        self,
        path: str | Path,
        on_error: Optional[Callable[[str, Exception], None]] = None
    ) -> tuple[list[str], dict[str, str]]:
        """
        Return (unity class names, serialized fields) for a file.
        Any failure is logged, passed to on_error and reported as no classes found.
        """
        try:
            cs_file = self.parse_file(path)
        except Exception as e:
            logger.error("Error processing script %s: %s", path, e)
            if on_error:
                on_error(str(path), e)
            return [], {}
        return [c.name for c in cs_file.unity_classes], cs_file.serialized_fields

    def _iter_class_nodes(self, root: Node) -> Iterator[Node]:
        """Yield every class declaration in document order, nested ones included."""
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type == "class_declaration":
                yield node
            stack.extend(reversed(node.children))

    def _parse_class(self, node: Node) -> CSClass:
        name_node = node.child_by_field_name("name")
        cs_class = CSClass(
            name=_text(name_node) if name_node else "",
            line=node.start_point[0] + 1
        )

        body = node.child_by_field_name("body")
        for child in node.named_children:
            if child.type == "base_list":
                cs_class.bases = [
                    _text(t) for t in child.named_children
                    if t.type not in ("comment", "argument_list")
                ]
            elif body is None and child.type == "declaration_list":
                body = child

        # Only fields declared directly in this class body
        if body is not None:
            for member in body.named_children:
                if member.type == "field_declaration":
                    cs_class.fields.extend(self._parse_field_declaration(member))

        return cs_class

    def _parse_field_declaration(self, node: Node) -> list[CSField]:
        modifiers = []
        attributes = []
        declaration = None

        for child in node.named_children:
            if child.type == "modifier":
                modifiers.append(_text(child))
            elif child.type == "attribute_list":
                attributes.extend(self._attribute_names(child))
            elif child.type == "variable_declaration":
                declaration = child

        if declaration is None:
            return []

        type_node = declaration.child_by_field_name("type")
        if type_node is None:
            type_node = declaration.named_children[0] if declaration.named_children else None
        field_type = _text(type_node) if type_node else ""

        fields = []
        for declarator in declaration.named_children:
            if declarator.type != "variable_declarator":
                continue
            name = self._declarator_name(declarator)
            if not name:
                continue
            fields.append(CSField(
                name=name,
                type=field_type,
                modifiers=modifiers,
                attributes=attributes,
                line=declarator.start_point[0] + 1
            ))
        return fields

    def _attribute_names(self, attribute_list: Node) -> list[str]:
        names = []
        for attribute in attribute_list.named_children:
            if attribute.type != "attribute":
                continue
            name_node = attribute.child_by_field_name("name")
            if name_node is None and attribute.named_children:
                name_node = attribute.named_children[0]
            if name_node is not None:
                names.append(_text(name_node))
        return names

    def _declarator_name(self, declarator: Node) -> Optional[str]:
        name_node = declarator.child_by_field_name("name")
        if name_node is None:
            for child in declarator.named_children:
                if child.type == "identifier":
                    name_node = child
                    break
        return _text(name_node) if name_node else None

    def to_dict(self, cs_file: CSFile) -> dict:
        """Convert CSFile to dictionary for JSON serialization."""
        return {
            "path": cs_file.path,
            "has_errors": cs_file.has_errors,
            "classes": [
                {
                    "name": c.name,
                    "bases": c.bases,
                    "is_unity_object": c.is_unity_object,
                    "line": c.line,
                    "fields": [
                        {
                            "name": f.name,
                            "type": f.type,
                            "modifiers": f.modifiers,
                            "attributes": f.attributes,
                            "serialized": f.is_serialized,
                            "line": f.line
                        }
                        for f in c.fields
                    ]
                }
                for c in cs_file.classes
            ],
            "serialized_fields": cs_file.serialized_fields
        }


def _text(node: Node) -> str:
    return node.text.decode("utf-8") if node.text is not None else ""
