"""
Declarative highlighting expectations and their verification.

An expectation pairs a flag ("the editor should highlight keywords") with a
minimum count. Every enabled flag is checked on each run, and failures
come back as messages rather than exceptions.
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from syntaxcheck.nodes import RenderedNode
from syntaxcheck.samples import TERRAFORM_SAMPLES
from syntaxcheck.summary import summarize
from syntaxcheck.tokens import ClassifierConfig, TokenType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExpectationSet:
    has_keywords: bool = False
    has_strings: bool = False
    has_comments: bool = False
    has_numbers: bool = False
    has_operators: bool = False
    has_punctuation: bool = False
    min_keyword_count: int = 0
    min_string_count: int = 0
    min_comment_count: int = 0
    min_number_count: int = 0
    min_operator_count: int = 0
    min_punctuation_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# (flag field, threshold field, token type, plural label), in check order.
EXPECTATION_RULES: List[Tuple[str, str, TokenType, str]] = [
    ("has_keywords", "min_keyword_count", TokenType.KEYWORD, "keywords"),
    ("has_strings", "min_string_count", TokenType.STRING, "strings"),
    ("has_comments", "min_comment_count", TokenType.COMMENT, "comments"),
    ("has_numbers", "min_number_count", TokenType.NUMBER, "numbers"),
    ("has_operators", "min_operator_count", TokenType.OPERATOR, "operators"),
    ("has_punctuation", "min_punctuation_count", TokenType.PUNCTUATION, "punctuation marks"),
]

CAMEL_CASE_KEYS = {
    "hasKeywords": "has_keywords",
    "hasStrings": "has_strings",
    "hasComments": "has_comments",
    "hasNumbers": "has_numbers",
    "hasOperators": "has_operators",
    "hasPunctuation": "has_punctuation",
    "minKeywordCount": "min_keyword_count",
    "minStringCount": "min_string_count",
    "minCommentCount": "min_comment_count",
    "minNumberCount": "min_number_count",
    "minOperatorCount": "min_operator_count",
    "minPunctuationCount": "min_punctuation_count",
}

FLAG_FIELDS = {rule[0] for rule in EXPECTATION_RULES}
THRESHOLD_FIELDS = {rule[1] for rule in EXPECTATION_RULES}


@dataclass(frozen=True)
class SyntaxTestCase:
    name: str
    code: str
    expectations: ExpectationSet = field(default_factory=ExpectationSet)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "code": self.code, "expectations": self.expectations.to_dict()}


@dataclass
class VerificationResult:
    passed: bool = True
    failures: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"passed": self.passed, "failures": list(self.failures)}


ExpectationsLike = Union[ExpectationSet, Mapping[str, Any], None]


def _threshold(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, float) and not value.is_integer():
        return 0
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(number, 0)


def normalize_expectations(expectations: ExpectationsLike) -> ExpectationSet:
    """Fill in every flag and threshold, defaulting to False and 0.

    Keys may be camelCase (``hasKeywords``) or field names
    (``has_keywords``). Unknown keys are ignored.
    """
    if isinstance(expectations, ExpectationSet):
        return expectations
    if not expectations:
        return ExpectationSet()

    values: Dict[str, Any] = {}
    for key, value in expectations.items():
        name = CAMEL_CASE_KEYS.get(key, key)
        if name in FLAG_FIELDS:
            values[name] = bool(value)
        elif name in THRESHOLD_FIELDS:
            values[name] = _threshold(value)
        else:
            logger.debug("Ignoring unknown expectation key %r", key)
    return ExpectationSet(**values)


def build_test_case(name: str, code: str, expectations: ExpectationsLike = None) -> SyntaxTestCase:
    return SyntaxTestCase(name=name, code=code, expectations=normalize_expectations(expectations))


def verify(
    root: Optional[RenderedNode],
    expectations: ExpectationsLike,
    config: Optional[ClassifierConfig] = None,
) -> VerificationResult:
    """Check the highlight counts under ``root`` against ``expectations``.

    An enabled flag with a zero threshold never fails.
    """
    expected = normalize_expectations(expectations)
    summary = summarize(root, config)
    result = VerificationResult()

    for flag, threshold_field, token_type, label in EXPECTATION_RULES:
        if not getattr(expected, flag):
            continue
        threshold = getattr(expected, threshold_field)
        count = summary.count(token_type)
        if count < threshold:
            result.passed = False
            result.failures.append(f"Expected at least {threshold} {label}, found {count}")

    return result


def verify_test_case(
    root: Optional[RenderedNode],
    test_case: SyntaxTestCase,
    config: Optional[ClassifierConfig] = None,
) -> VerificationResult:
    return verify(root, test_case.expectations, config)


def _case_from_entry(entry: Any, default_name: Optional[str] = None) -> Optional[SyntaxTestCase]:
    if not isinstance(entry, dict):
        return None
    name = entry.get("name") or default_name
    code = entry.get("code")
    if not name or not isinstance(code, str):
        return None
    expectations = entry.get("expectations")
    if not isinstance(expectations, dict):
        expectations = None
    return build_test_case(str(name), code, expectations)


def load_test_cases(path: Union[str, Path]) -> List[SyntaxTestCase]:
    """Read test cases from a JSON list or a name -> case mapping.

    Entries without a name or code are skipped; an unreadable file yields an
    empty list.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.debug("Could not read test cases from %s: %s", path, exc)
        return []

    if isinstance(data, dict):
        entries = [(entry, name) for name, entry in data.items()]
    elif isinstance(data, list):
        entries = [(entry, None) for entry in data]
    else:
        return []

    cases = []
    for entry, default_name in entries:
        case = _case_from_entry(entry, default_name)
        if case is None:
            logger.debug("Skipping malformed test case entry: %r", entry)
            continue
        cases.append(case)
    return cases


DEFAULT_EXPECTATIONS: Dict[str, Dict[str, Any]] = {
    "basicResource": {"hasKeywords": True, "hasStrings": True, "hasPunctuation": True,
                      "minKeywordCount": 1, "minStringCount": 4},
    "variables": {"hasKeywords": True, "hasStrings": True, "hasNumbers": True,
                  "minKeywordCount": 2, "minStringCount": 4, "minNumberCount": 1},
    "outputs": {"hasKeywords": True, "hasStrings": True, "minKeywordCount": 1, "minStringCount": 2},
    "modules": {"hasKeywords": True, "hasStrings": True, "minKeywordCount": 1, "minStringCount": 5},
    "dataSources": {"hasKeywords": True, "hasStrings": True, "minKeywordCount": 1, "minStringCount": 3},
    "locals": {"hasKeywords": True, "hasStrings": True, "hasNumbers": True,
               "minKeywordCount": 1, "minStringCount": 2, "minNumberCount": 1},
    "terraformBlock": {"hasKeywords": True, "hasStrings": True, "minKeywordCount": 1, "minStringCount": 3},
    "provider": {"hasKeywords": True, "hasStrings": True, "minKeywordCount": 1, "minStringCount": 1},
    "comments": {"hasKeywords": True, "hasStrings": True, "hasComments": True,
                 "minKeywordCount": 1, "minStringCount": 4, "minCommentCount": 2},
    "numbersAndOperators": {"hasKeywords": True, "hasNumbers": True, "hasOperators": True,
                            "minKeywordCount": 1, "minNumberCount": 6},
    "complexNested": {"hasKeywords": True, "hasStrings": True, "hasNumbers": True, "hasPunctuation": True,
                      "minKeywordCount": 1, "minStringCount": 8, "minNumberCount": 4},
    "stringInterpolation": {"hasKeywords": True, "hasStrings": True, "minKeywordCount": 1, "minStringCount": 3},
}


def default_test_cases() -> List[SyntaxTestCase]:
    """One test case per bundled Terraform sample."""
    return [
        build_test_case(name, code, DEFAULT_EXPECTATIONS.get(name))
        for name, code in TERRAFORM_SAMPLES.items()
    ]
