"""C# field discovery backed by a tree-sitter syntax tree."""

from pathlib import Path
from typing import Dict, FrozenSet, Iterator, Optional

import tree_sitter_c_sharp
from loguru import logger
from tree_sitter import Language, Node, Parser

CSHARP_LANGUAGE = Language(tree_sitter_c_sharp.language())

TYPE_DECLARATIONS = {"class_declaration", "struct_declaration", "record_declaration"}
NON_INSTANCE_MODIFIERS = {"static", "const"}


# --- AST Parser Setup ---
def initialize_ast_parser() -> Parser:
    """Create a C# parser. Parsers are not shared between threads."""
    return Parser(CSHARP_LANGUAGE)


def _walk(node: Node) -> Iterator[Node]:
    """Pre-order traversal in source order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def _text(node: Node) -> str:
    return node.text.decode("utf-8", errors="replace")


def first_type_declaration(root: Node) -> Optional[Node]:
    return next((n for n in _walk(root) if n.type in TYPE_DECLARATIONS), None)


def is_instance_field(field: Node) -> bool:
    for child in field.children:
        if child.type == "modifier" and _text(child) in NON_INSTANCE_MODIFIERS:
            return False
        if child.type in NON_INSTANCE_MODIFIERS:
            return False
    return True


def declarator_names(field: Node) -> Iterator[str]:
    for declaration in field.children:
        if declaration.type != "variable_declaration":
            continue
        for declarator in declaration.children:
            if declarator.type != "variable_declarator":
                continue
            name = declarator.child_by_field_name("name")
            if name is None:
                name = next((c for c in declarator.children if c.type == "identifier"), None)
            if name is not None:
                # Verbatim identifiers (@class) serialize without the prefix
                yield _text(name).lstrip("@")


def parse_field_names(source: bytes, parser: Optional[Parser] = None) -> FrozenSet[str]:
    """Names of the instance fields declared inside the first type of ``source``.

    Fields of nested types count as well, since they sit textually inside
    the outer declaration.
    """
    parser = parser or initialize_ast_parser()
    tree = parser.parse(source)
    if tree.root_node.has_error:
        logger.debug("C# source contains syntax errors; using recovered tree")

    declaration = first_type_declaration(tree.root_node)
    if declaration is None:
        return frozenset()

    names = set()
    for node in _walk(declaration):
        if node.type == "field_declaration" and is_instance_field(node):
            names.update(declarator_names(node))
    return frozenset(names)


def read_field_names(path: Path) -> FrozenSet[str]:
    """Field names of a script file; empty when the file cannot be read."""
    try:
        source = path.read_bytes()
    except OSError as e:
        logger.warning(f"Failed to read script {path}: {e}")
        return frozenset()
    try:
        return parse_field_names(source)
    except Exception as e:
        logger.warning(f"Failed to parse script {path}: {e}")
        return frozenset()


class FieldValidator:
    """Per-run cache of script field names."""

    def __init__(self):
        self._cache: Dict[Path, FrozenSet[str]] = {}

    def prime(self, path: Path, names: FrozenSet[str]):
        self._cache[path] = names

    def field_names(self, path: Path) -> FrozenSet[str]:
        if path not in self._cache:
            self._cache[path] = read_field_names(path)
        return self._cache[path]
