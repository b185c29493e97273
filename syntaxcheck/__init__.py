"""Verify syntax highlighting in rendered code editors."""

from syntaxcheck.expectations import (
    ExpectationSet,
    SyntaxTestCase,
    VerificationResult,
    build_test_case,
    load_test_cases,
    verify,
    verify_test_case,
)
from syntaxcheck.nodes import DomNode, RenderedNode, node_from_html, node_from_snapshot
from syntaxcheck.scanner import collect_all, contains_text, scan_by_type, verify_keyword_highlighting
from syntaxcheck.summary import Summary, summarize
from syntaxcheck.tokens import ClassifierConfig, TokenType, classify, has_syntax_highlighting

__all__ = [
    "ClassifierConfig",
    "DomNode",
    "ExpectationSet",
    "RenderedNode",
    "Summary",
    "SyntaxTestCase",
    "TokenType",
    "VerificationResult",
    "build_test_case",
    "classify",
    "collect_all",
    "contains_text",
    "has_syntax_highlighting",
    "load_test_cases",
    "node_from_html",
    "node_from_snapshot",
    "scan_by_type",
    "summarize",
    "verify",
    "verify_keyword_highlighting",
    "verify_test_case",
]
