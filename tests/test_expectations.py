import json
from dataclasses import FrozenInstanceError

import pytest

from syntaxcheck.expectations import (
    ExpectationSet,
    build_test_case,
    default_test_cases,
    load_test_cases,
    normalize_expectations,
    verify,
    verify_test_case,
)
from syntaxcheck.nodes import DomNode
from syntaxcheck.samples import TERRAFORM_SAMPLES


class TestBuildTestCase:
    def test_fills_defaults(self):
        case = build_test_case("t1", "resource {}", {"hasStrings": True})
        assert case.name == "t1"
        assert case.code == "resource {}"
        assert case.expectations == ExpectationSet(has_strings=True)
        assert case.expectations.min_string_count == 0
        assert case.expectations.has_keywords is False
        assert case.expectations.min_keyword_count == 0

    def test_no_expectations(self):
        assert build_test_case("t", "").expectations == ExpectationSet()

    def test_snake_case_keys(self):
        case = build_test_case("t", "", {"has_numbers": True, "min_number_count": 2})
        assert case.expectations.has_numbers
        assert case.expectations.min_number_count == 2

    def test_repairs_bad_values(self):
        expected = normalize_expectations({
            "hasKeywords": 1,
            "minKeywordCount": "3",
            "hasStrings": "",
            "minStringCount": "lots",
            "minCommentCount": -4,
            "minNumberCount": None,
            "flavour": "vanilla",
        })
        assert expected.has_keywords is True
        assert expected.min_keyword_count == 3
        assert expected.has_strings is False
        assert expected.min_string_count == 0
        assert expected.min_comment_count == 0
        assert expected.min_number_count == 0

    def test_infinite_threshold_becomes_zero(self):
        case = build_test_case("t", "", {"hasKeywords": True, "minKeywordCount": float("inf")})
        assert case.expectations.min_keyword_count == 0
        assert normalize_expectations({"minStringCount": float("nan")}).min_string_count == 0
        assert normalize_expectations({"minNumberCount": float("-inf")}).min_number_count == 0

    def test_only_integral_thresholds_are_kept(self):
        expected = normalize_expectations({
            "minKeywordCount": 2.7,
            "minStringCount": 3.0,
            "minCommentCount": "3",
            "minNumberCount": "2.5",
            "minOperatorCount": True,
        })
        assert expected.min_keyword_count == 0
        assert expected.min_string_count == 3
        assert expected.min_comment_count == 3
        assert expected.min_number_count == 0
        assert expected.min_operator_count == 0

    def test_existing_set_is_kept(self):
        expected = ExpectationSet(has_comments=True, min_comment_count=1)
        assert build_test_case("t", "", expected).expectations is expected

    def test_expectations_are_immutable(self):
        expected = ExpectationSet()
        with pytest.raises(FrozenInstanceError):
            expected.has_keywords = True


class TestVerify:
    def test_threshold_not_met(self, keyword_tree):
        result = verify(keyword_tree.children[0].children[0], {"hasKeywords": True, "minKeywordCount": 5})
        assert result.passed is False
        assert "Expected at least 5 keywords, found 1" in result.failures

    def test_two_keywords_below_five(self, make_token):
        root = DomNode(children=[make_token("keyword", "resource"), make_token("keyword", "variable")])
        result = verify(root, {"hasKeywords": True, "minKeywordCount": 5})
        assert result.passed is False
        assert result.failures == ["Expected at least 5 keywords, found 2"]

    def test_threshold_met(self, keyword_tree):
        result = verify(keyword_tree, {"hasKeywords": True, "minKeywordCount": 3})
        assert result.passed is True
        assert result.failures == []

    def test_reports_every_failure_in_declared_order(self, string_comment_tree):
        result = verify(string_comment_tree, {
            "hasNumbers": True,
            "minNumberCount": 1,
            "hasKeywords": True,
            "minKeywordCount": 2,
        })
        assert result.passed is False
        assert result.failures == [
            "Expected at least 2 keywords, found 0",
            "Expected at least 1 numbers, found 0",
        ]

    def test_zero_threshold_always_passes(self):
        result = verify(DomNode(), {
            "hasKeywords": True,
            "hasStrings": True,
            "hasComments": True,
            "hasNumbers": True,
            "hasOperators": True,
            "hasPunctuation": True,
        })
        assert result.passed is True
        assert result.failures == []

    def test_disabled_flag_ignores_threshold(self):
        result = verify(DomNode(), {"hasStrings": False, "minStringCount": 10})
        assert result.passed is True

    def test_none_root(self):
        result = verify(None, {"hasComments": True, "minCommentCount": 1})
        assert result.failures == ["Expected at least 1 comments, found 0"]

    def test_punctuation_label(self):
        result = verify(DomNode(), {"hasPunctuation": True, "minPunctuationCount": 2})
        assert result.failures == ["Expected at least 2 punctuation marks, found 0"]

    def test_fresh_result_per_call(self, keyword_tree):
        first = verify(keyword_tree, {"hasStrings": True, "minStringCount": 9})
        second = verify(keyword_tree, {"hasStrings": True, "minStringCount": 9})
        assert first is not second
        assert first.failures is not second.failures
        assert first.failures == second.failures

    def test_verify_test_case(self, keyword_tree):
        case = build_test_case("kw", "", {"hasKeywords": True, "minKeywordCount": 4})
        result = verify_test_case(keyword_tree, case)
        assert result.to_dict() == {"passed": False, "failures": ["Expected at least 4 keywords, found 3"]}


class TestLoadTestCases:
    def test_list_format(self, tmp_path):
        path = tmp_path / "cases.json"
        path.write_text(json.dumps([
            {"name": "a", "code": "locals {}", "expectations": {"hasKeywords": True, "minKeywordCount": 1}},
            {"name": "missing-code"},
            "junk",
        ]), encoding="utf-8")
        cases = load_test_cases(path)
        assert [c.name for c in cases] == ["a"]
        assert cases[0].expectations.min_keyword_count == 1

    def test_mapping_format(self, tmp_path):
        path = tmp_path / "cases.json"
        path.write_text(json.dumps({"b": {"code": "x = 1", "expectations": "bad"}}), encoding="utf-8")
        cases = load_test_cases(path)
        assert cases[0].name == "b"
        assert cases[0].expectations == ExpectationSet()

    def test_unreadable_file(self, tmp_path):
        assert load_test_cases(tmp_path / "missing.json") == []
        broken = tmp_path / "broken.json"
        broken.write_text("{not json", encoding="utf-8")
        assert load_test_cases(broken) == []

    def test_infinity_threshold_in_file(self, tmp_path):
        path = tmp_path / "cases.json"
        path.write_text(
            '[{"name": "a", "code": "x", "expectations": {"hasKeywords": true, "minKeywordCount": Infinity}}]',
            encoding="utf-8",
        )
        cases = load_test_cases(path)
        assert [c.name for c in cases] == ["a"]
        assert cases[0].expectations.min_keyword_count == 0
        assert verify(DomNode(), cases[0].expectations).passed is True


def test_default_test_cases_cover_every_sample():
    cases = default_test_cases()
    assert [c.name for c in cases] == list(TERRAFORM_SAMPLES)
    assert all(c.expectations.has_keywords for c in cases)
    comments = next(c for c in cases if c.name == "comments")
    assert comments.expectations.min_comment_count == 2
