"""Locate the splice point inside an existing Go source file.

The file is parsed with tree-sitter's Go grammar to find the package
clause and the body of the top-level ``func main``. Methods named
``main`` are ``method_declaration`` nodes and never match.
"""

from __future__ import annotations

from dataclasses import dataclass

import tree_sitter_language_pack as tslp

from igo.config.models import EMPTY_SKELETON

MAIN_STUB = "\n\nfunc main() {}\n"


class SkeletonError(ValueError):
    """Raised when the source cannot be parsed."""


@dataclass(frozen=True)
class Skeleton:
    """Program text plus the offset where statements are spliced in."""

    source: str
    insertion_offset: int


def _parse(data: bytes):
    """Parse Go source, rejecting anything tree-sitter had to recover from."""
    tree = tslp.get_parser("go").parse(data)
    root = tree.root_node
    if root.has_error:
        node = _first_error(root)
        row, column = node.start_point
        raise SkeletonError(f"line {row + 1}:{column + 1}: syntax error")
    return root


def _first_error(node):
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error:
            return _first_error(child)
    return node


def _char_offset(data: bytes, byte_offset: int) -> int:
    return len(data[:byte_offset].decode("utf-8"))


def _rename_package(data: bytes, root) -> bytes:
    clause = next((n for n in root.named_children if n.type == "package_clause"), None)
    if clause is None:
        raise SkeletonError("missing package clause")
    name = next(n for n in clause.named_children if n.type == "package_identifier")
    if name.text == b"main":
        return data
    return data[: name.start_byte] + b"main" + data[name.end_byte :]


def _find_main_close(root) -> int | None:
    """Return the byte offset of the closing brace of top-level ``func main``."""
    for node in root.named_children:
        if node.type != "function_declaration":
            continue
        name = node.child_by_field_name("name")
        if name is None or name.text != b"main":
            continue
        body = node.child_by_field_name("body")
        if body is None:
            raise SkeletonError("func main has no body")
        return body.end_byte - 1
    return None


def prepare_skeleton(source: str) -> Skeleton:
    """Turn a Go source file into a skeleton that statements can be spliced into.

    The package clause is renamed to ``main`` if needed, and a stub
    ``func main`` is appended when the file has none. The insertion
    offset is the position of the closing brace of ``main``, counted in
    characters of the returned source.
    """
    data = source.encode("utf-8")
    data = _rename_package(data, _parse(data))
    close = _find_main_close(_parse(data))
    source = data.decode("utf-8")
    if close is None:
        source = source + MAIN_STUB
        return Skeleton(source=source, insertion_offset=len(source) - 2)
    return Skeleton(source=source, insertion_offset=_char_offset(data, close))


def empty_skeleton() -> Skeleton:
    return Skeleton(source=EMPTY_SKELETON, insertion_offset=len(EMPTY_SKELETON) - 2)
