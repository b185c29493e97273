"""
Rendered node model and loaders.

The verification engine only needs three things from a rendered tree: a
node's children, its class list and its text content. Anything exposing
those attributes works, including the DomNode type defined here.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Protocol, Tuple

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

HTML_PARSER = "html.parser"


class RenderedNode(Protocol):
    children: Iterable[Any]
    classes: Optional[Iterable[str]]
    text: str


@dataclass
class DomNode:
    tag: str = "span"
    classes: Tuple[str, ...] = ()
    text: str = ""
    children: List["DomNode"] = field(default_factory=list)

    def append(self, child: "DomNode") -> "DomNode":
        self.children.append(child)
        return child


def node_classes(node: Optional[RenderedNode]) -> Tuple[str, ...]:
    """Class list of ``node``; empty when the node has none."""
    if node is None:
        return ()
    classes = getattr(node, "classes", None)
    if not classes:
        return ()
    if isinstance(classes, str):
        return tuple(classes.split())
    return tuple(c for c in classes if isinstance(c, str))


def node_text(node: Optional[RenderedNode]) -> str:
    if node is None:
        return ""
    return getattr(node, "text", None) or ""


def node_children(node: Optional[RenderedNode]) -> List[RenderedNode]:
    if node is None:
        return []
    return list(getattr(node, "children", None) or [])


def iter_descendants(root: Optional[RenderedNode]) -> Iterator[RenderedNode]:
    """Yield every descendant of ``root`` in document (pre-order) order.

    The root itself is not yielded.
    """
    stack = list(reversed(node_children(root)))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node_children(node)))


def node_from_snapshot(data: Any) -> Optional[DomNode]:
    """Build a DomNode tree from a JSON-style snapshot dict.

    Accepts ``classes`` as a list or ``className`` as a space separated
    string. Entries that are not dicts are dropped.
    """
    if not isinstance(data, dict):
        return None

    raw_classes = data.get("classes")
    if raw_classes is None:
        raw_classes = data.get("className", "")
    if isinstance(raw_classes, str):
        classes = tuple(raw_classes.split())
    elif isinstance(raw_classes, list):
        classes = tuple(c for c in raw_classes if isinstance(c, str))
    else:
        classes = ()

    children = []
    for child in data.get("children") or []:
        node = node_from_snapshot(child)
        if node is None:
            logger.debug("Skipping malformed snapshot child: %r", child)
            continue
        children.append(node)

    text = data.get("text")
    if not isinstance(text, str):
        text = "".join(c.text for c in children)

    return DomNode(
        tag=str(data.get("tag") or "span").lower(),
        classes=classes,
        text=text,
        children=children,
    )


def node_to_snapshot(node: Optional[RenderedNode]) -> Dict[str, Any]:
    return {
        "tag": getattr(node, "tag", "span"),
        "classes": list(node_classes(node)),
        "text": node_text(node),
        "children": [node_to_snapshot(c) for c in node_children(node)],
    }


def _node_from_tag(tag: Tag) -> DomNode:
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    children = [_node_from_tag(c) for c in tag.children if isinstance(c, Tag)]
    return DomNode(
        tag=tag.name,
        classes=tuple(classes),
        text=tag.get_text(),
        children=children,
    )


def node_from_html(html: str, selector: Optional[str] = None) -> Optional[DomNode]:
    """Parse saved editor HTML into a DomNode tree.

    With ``selector`` the tree is rooted at the first match; without it the
    whole document is wrapped in a synthetic root. Returns None when the
    selector matches nothing.
    """
    soup = BeautifulSoup(html or "", HTML_PARSER)
    if selector:
        match = soup.select_one(selector)
        if match is None:
            return None
        return _node_from_tag(match)

    children = [_node_from_tag(c) for c in soup.children if isinstance(c, Tag)]
    return DomNode(tag="#document", text=soup.get_text(), children=children)


def read_snapshot(path: Path) -> Optional[DomNode]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return node_from_snapshot(data)


def read_html(path: Path, selector: Optional[str] = None) -> Optional[DomNode]:
    return node_from_html(Path(path).read_text(encoding="utf-8"), selector)
