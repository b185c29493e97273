"""
Token type classification for rendered editor nodes.

CodeMirror marks highlighted fragments with classes such as ``cm-keyword``
or ``cm-string``. A node is classified as type T when its class list holds
the marker ``<prefix><T>``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from syntaxcheck.nodes import RenderedNode, iter_descendants, node_classes

DEFAULT_MARKER_PREFIX = "cm-"

# Substrings checked by the loose has_syntax_highlighting heuristic.
HEURISTIC_TYPE_HINTS = ["keyword", "string", "comment"]


class TokenType(str, Enum):
    KEYWORD = "keyword"
    STRING = "string"
    COMMENT = "comment"
    NUMBER = "number"
    OPERATOR = "operator"
    PUNCTUATION = "punctuation"
    PROPERTY = "property"
    VARIABLE = "variable"
    BOOLEAN = "bool"


@dataclass(frozen=True)
class ClassifierConfig:
    marker_prefix: str = DEFAULT_MARKER_PREFIX


DEFAULT_CONFIG = ClassifierConfig()

TokenTypeLike = Union[TokenType, str]


def resolve_config(config: Optional[ClassifierConfig]) -> ClassifierConfig:
    return config if config is not None else DEFAULT_CONFIG


def type_name(token_type: TokenTypeLike) -> str:
    if isinstance(token_type, TokenType):
        return token_type.value
    return str(token_type)


def parse_token_type(value: TokenTypeLike) -> Optional[TokenType]:
    """Return the TokenType named by ``value``, or None if it is unknown."""
    try:
        return TokenType(type_name(value))
    except ValueError:
        return None


def marker_for(token_type: TokenTypeLike, config: Optional[ClassifierConfig] = None) -> str:
    return f"{resolve_config(config).marker_prefix}{type_name(token_type)}"


def classify_all(node: Optional[RenderedNode], config: Optional[ClassifierConfig] = None) -> List[TokenType]:
    """Every known token type whose marker ``node`` carries, in TokenType order."""
    classes = set(node_classes(node))
    if not classes:
        return []
    return [t for t in TokenType if marker_for(t, config) in classes]


def classify(node: Optional[RenderedNode], config: Optional[ClassifierConfig] = None) -> Optional[TokenType]:
    """Canonical token type of ``node``.

    None means the node is not a highlighted token. Nodes without a class
    list are treated the same way.
    """
    types = classify_all(node, config)
    return types[0] if types else None


def has_syntax_class(node: Optional[RenderedNode], token_type: TokenTypeLike, config: Optional[ClassifierConfig] = None) -> bool:
    if node is None:
        return False
    return marker_for(token_type, config) in node_classes(node)


def has_syntax_highlighting(root: Optional[RenderedNode], config: Optional[ClassifierConfig] = None) -> bool:
    """Loose check that anything under ``root`` looks highlighted.

    Matches class substrings rather than exact markers, so ``cm-keywordish``
    counts. Not used for pass/fail decisions.
    """
    prefix = resolve_config(config).marker_prefix
    for node in iter_descendants(root):
        classes = node_classes(node)
        if not any(prefix in c for c in classes):
            continue
        for hint in HEURISTIC_TYPE_HINTS:
            if any(hint in c for c in classes):
                return True
    return False
