from syntaxcheck.nodes import DomNode
from syntaxcheck.summary import Summary, summarize
from syntaxcheck.tokens import TokenType


def test_strings_and_comment(string_comment_tree):
    summary = summarize(string_comment_tree)
    assert summary.by_type == {TokenType.STRING: 2, TokenType.COMMENT: 1}
    assert summary.total == 3
    assert summary.to_dict() == {"total": 3, "by_type": {"string": 2, "comment": 1}}


def test_total_equals_sum_of_counts(keyword_tree, string_comment_tree):
    for tree in (keyword_tree, string_comment_tree, DomNode()):
        summary = summarize(tree)
        assert summary.total == sum(summary.by_type.values())


def test_repeated_calls_are_identical(keyword_tree):
    assert summarize(keyword_tree) == summarize(keyword_tree)


def test_reflects_mutation_between_calls(keyword_tree, make_token):
    before = summarize(keyword_tree)
    keyword_tree.children[0].children[0].append(make_token("number", "3"))
    after = summarize(keyword_tree)
    assert before.count("number") == 0
    assert after.count("number") == 1
    assert after.total == before.total + 1


def test_none_root_is_empty():
    summary = summarize(None)
    assert summary == Summary()
    assert summary.total == 0


def test_count_of_missing_or_unknown_type(keyword_tree):
    summary = summarize(keyword_tree)
    assert summary.count(TokenType.COMMENT) == 0
    assert summary.count("meta") == 0
    assert summary.count("keyword") == 3
