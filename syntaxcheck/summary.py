"""Per-type highlight counts for a rendered tree."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from syntaxcheck.nodes import RenderedNode
from syntaxcheck.scanner import collect_all
from syntaxcheck.tokens import ClassifierConfig, TokenType, TokenTypeLike, parse_token_type


@dataclass(frozen=True)
class Summary:
    by_type: Dict[TokenType, int] = field(default_factory=dict)
    total: int = 0

    def count(self, token_type: TokenTypeLike) -> int:
        resolved = parse_token_type(token_type)
        if resolved is None:
            return 0
        return self.by_type.get(resolved, 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "by_type": {t.value: n for t, n in self.by_type.items()},
        }


def summarize(root: Optional[RenderedNode], config: Optional[ClassifierConfig] = None) -> Summary:
    """Count classified nodes per token type.

    Always walks the tree again; the renderer may have changed it since the
    last call.
    """
    by_type = {t: len(nodes) for t, nodes in collect_all(root, config).items()}
    return Summary(by_type=by_type, total=sum(by_type.values()))
