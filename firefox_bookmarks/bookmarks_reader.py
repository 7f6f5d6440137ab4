"""Firefox bookmarks reader module.

Reads a Firefox JSON bookmark backup and flattens its folder tree into an
ordered tuple of bookmarks.
"""
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from firefox_bookmarks.errors import BookmarkParseError, BookmarkReadError, EmptyDataError


PLACE_TYPE = "text/x-moz-place"
CONTAINER_TYPE = "text/x-moz-place-container"
TAGS_ROOT = "tagsFolder"


@dataclass(frozen=True)
class Bookmark:
    """A single bookmark entry."""
    title: str
    url: str


@dataclass(frozen=True)
class PlaceNode:
    """Leaf node: one bookmark."""
    title: str
    uri: str


@dataclass(frozen=True)
class ContainerNode:
    """Folder node."""
    title: str
    root: Optional[str]
    children: Tuple["Node", ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class OtherNode:
    """Separators, leaves without a URI and anything unrecognized."""
    type: Optional[str] = None


Node = Union[PlaceNode, ContainerNode, OtherNode]


def load_bookmarks_data(bookmarks_path: Path) -> bytes:
    """Read the raw bookmark file.

    Raises:
        BookmarkReadError: If the file can't be read
        EmptyDataError: If the file is empty
    """
    try:
        data = Path(bookmarks_path).read_bytes()
    except OSError as e:
        raise BookmarkReadError(f"{bookmarks_path}: {e.strerror or e}") from e

    if not data:
        raise EmptyDataError(f"{bookmarks_path}: Empty data")

    return data


def _children_of(raw: Dict[str, Any]) -> List[Any]:
    children = raw.get("children") or []
    if not isinstance(children, list):
        raise BookmarkParseError("'children' must be a list")
    return children


def parse_node(raw: Any) -> Node:
    """Turn a raw JSON node into a tagged node."""
    if not isinstance(raw, dict):
        return OtherNode()

    node_type = raw.get("type")
    title = raw.get("title") or ""

    if node_type == PLACE_TYPE and isinstance(raw.get("uri"), str):
        return PlaceNode(title=str(title), uri=raw["uri"])

    if node_type == CONTAINER_TYPE:
        children = tuple(parse_node(child) for child in _children_of(raw))
        return ContainerNode(title=str(title), root=raw.get("root"), children=children)

    return OtherNode(type=node_type)


def parse_bookmarks_document(data: bytes) -> ContainerNode:
    """Parse the JSON document into its root container.

    Raises:
        BookmarkParseError: If data isn't a JSON bookmark tree
    """
    try:
        raw = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise BookmarkParseError(str(e)) from e
    except RecursionError as e:
        raise BookmarkParseError("Bookmark tree is nested too deeply") from e

    if not isinstance(raw, dict) or not isinstance(raw.get("children"), list):
        raise BookmarkParseError("Top-level object has no 'children' list")

    try:
        children = tuple(parse_node(child) for child in raw["children"])
    except RecursionError as e:
        raise BookmarkParseError("Bookmark tree is nested too deeply") from e
    return ContainerNode(title=str(raw.get("title") or ""), root=raw.get("root"), children=children)


def extract_bookmarks(node: Node, bookmarks: List[Bookmark]) -> None:
    """Recursively extract bookmarks in pre-order.

    Args:
        node: Current node in the bookmarks tree
        bookmarks: List to accumulate bookmarks
    """
    if isinstance(node, PlaceNode):
        bookmarks.append(Bookmark(title=node.title, url=node.uri))
    elif isinstance(node, ContainerNode):
        for child in node.children:
            extract_bookmarks(child, bookmarks)


def flatten_bookmarks(document: ContainerNode) -> Tuple[Bookmark, ...]:
    """Flatten every top-level folder except the tags folder."""
    all_bookmarks: List[Bookmark] = []

    for child in document.children:
        if isinstance(child, ContainerNode) and child.root == TAGS_ROOT:
            continue
        extract_bookmarks(child, all_bookmarks)

    return tuple(all_bookmarks)


def read_bookmarks(bookmarks_path: Path) -> Tuple[Bookmark, ...]:
    """Read all bookmarks from a Firefox JSON backup.

    Args:
        bookmarks_path: Path to the bookmark file

    Returns:
        Bookmarks in depth-first pre-order

    Raises:
        BookmarkReadError: If the file can't be read
        EmptyDataError: If the file is empty
        BookmarkParseError: If the file is malformed
    """
    data = load_bookmarks_data(bookmarks_path)
    document = parse_bookmarks_document(data)
    try:
        return flatten_bookmarks(document)
    except RecursionError as e:
        raise BookmarkParseError("Bookmark tree is nested too deeply") from e
