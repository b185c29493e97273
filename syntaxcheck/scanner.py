"""Collect classified nodes from a rendered tree."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from syntaxcheck.nodes import RenderedNode, iter_descendants, node_classes, node_text
from syntaxcheck.samples import TERRAFORM_KEYWORDS
from syntaxcheck.tokens import (
    ClassifierConfig,
    TokenType,
    TokenTypeLike,
    classify_all,
    marker_for,
)


@dataclass
class KeywordReport:
    found: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)


def scan_by_type(root: Optional[RenderedNode], token_type: TokenTypeLike, config: Optional[ClassifierConfig] = None) -> List[RenderedNode]:
    """Descendants of ``root`` marked as ``token_type``, in document order."""
    if root is None:
        return []
    marker = marker_for(token_type, config)
    return [node for node in iter_descendants(root) if marker in node_classes(node)]


def contains_text(
    root: Optional[RenderedNode],
    text: str,
    token_type: TokenTypeLike,
    config: Optional[ClassifierConfig] = None,
) -> bool:
    if root is None or not text:
        return False
    return any(text in node_text(node) for node in scan_by_type(root, token_type, config))


def collect_all(root: Optional[RenderedNode], config: Optional[ClassifierConfig] = None) -> Dict[TokenType, List[RenderedNode]]:
    """Group every classified descendant by token type in one walk.

    A node carrying several markers is listed under each of them. Types with
    no nodes are left out.
    """
    if root is None:
        return {}
    grouped: Dict[TokenType, List[RenderedNode]] = {t: [] for t in TokenType}
    for node in iter_descendants(root):
        for token_type in classify_all(node, config):
            grouped[token_type].append(node)
    return {t: nodes for t, nodes in grouped.items() if nodes}


def verify_keyword_highlighting(
    root: Optional[RenderedNode],
    keywords: Sequence[str] = TERRAFORM_KEYWORDS,
    config: Optional[ClassifierConfig] = None,
) -> KeywordReport:
    report = KeywordReport()
    for keyword in keywords:
        if contains_text(root, keyword, TokenType.KEYWORD, config):
            report.found.append(keyword)
        else:
            report.missing.append(keyword)
    return report


def count_string_elements(root: Optional[RenderedNode], config: Optional[ClassifierConfig] = None) -> int:
    return len(scan_by_type(root, TokenType.STRING, config))


def count_comment_elements(root: Optional[RenderedNode], config: Optional[ClassifierConfig] = None) -> int:
    return len(scan_by_type(root, TokenType.COMMENT, config))


def count_number_elements(root: Optional[RenderedNode], config: Optional[ClassifierConfig] = None) -> int:
    return len(scan_by_type(root, TokenType.NUMBER, config))
