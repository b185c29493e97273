import pytest

from syntaxcheck.nodes import DomNode


def token(token_type: str, text: str, prefix: str = "cm-") -> DomNode:
    return DomNode(tag="span", classes=(f"{prefix}{token_type}",), text=text)


def line(*children: DomNode) -> DomNode:
    return DomNode(
        tag="div",
        classes=("cm-line",),
        text="".join(c.text for c in children),
        children=list(children),
    )


def editor(*lines: DomNode) -> DomNode:
    content = DomNode(
        tag="div",
        classes=("cm-content",),
        text="\n".join(row.text for row in lines),
        children=list(lines),
    )
    return DomNode(tag="div", classes=("cm-editor",), text=content.text, children=[content])


@pytest.fixture
def make_token():
    return token


@pytest.fixture
def keyword_tree():
    """Editor holding three keyword tokens: resource, variable, resource."""
    return editor(
        line(token("keyword", "resource"), DomNode(text=" "), token("string", '"aws_instance"')),
        line(token("keyword", "variable"), DomNode(text=" "), token("string", '"region"')),
        line(token("keyword", "resource"), DomNode(text=" {")),
    )


@pytest.fixture
def string_comment_tree():
    """Editor holding two strings and one comment, nothing else highlighted."""
    return editor(
        line(token("comment", "# note")),
        line(DomNode(text="ami = "), token("string", '"ami-123"')),
        line(DomNode(text="type = "), token("string", '"t2.micro"')),
    )
