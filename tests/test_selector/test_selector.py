"""Tests for selector parsing and tree matching."""

import pytest

from markstyle.dom import ElementNode
from markstyle.html import HTMLParser
from markstyle.selector import (
    CHILD,
    DESCENDANT,
    NONE,
    SelectorEngine,
    parse_segment,
    parse_selector,
    split_top_level,
)


def select(html: str, selector: str):
    return SelectorEngine(HTMLParser(html).parse()).select(selector)


def texts(nodes):
    return [n.text_content() for n in nodes]


LIST_HTML = "<ul><li>a</li><li>b</li><li>c</li></ul>"


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestParseSegment:
    def test_all_parts(self):
        seg = parse_segment('div#main.a.b[data-x="1"]:nth-child(odd)')
        assert seg.tag == "div"
        assert seg.id == "main"
        assert seg.classes == ["a", "b"]
        assert seg.attributes == {"data-x": "1"}
        assert seg.pseudo.nth_child == "odd"

    def test_numeric_nth_child(self):
        assert parse_segment("li:nth-child( 3 )").pseudo.nth_child == 3

    def test_flags(self):
        seg = parse_segment("p:first-child:last-child:empty")
        assert seg.tag == "p"
        assert seg.pseudo.first_child and seg.pseudo.last_child and seg.pseudo.empty

    def test_presence_attribute(self):
        assert parse_segment("[hidden]").attributes == {"hidden": None}

    def test_universal(self):
        assert parse_segment("*.x").tag is None

    def test_unsupported_pseudo_stays_in_tag(self):
        assert parse_segment("a:hover").tag == "a:hover"


class TestParseSelector:
    def test_groups_and_combinators(self):
        chains = parse_selector("ul>li, div p")
        assert len(chains) == 2
        assert [s.combinator for s in chains[0]] == [NONE, CHILD]
        assert [s.combinator for s in chains[1]] == [NONE, DESCENDANT]
        assert chains[0][1].segment.tag == "li"

    def test_sibling_combinator_unsupported(self):
        assert parse_selector("p + p") == []

    def test_split_top_level(self):
        assert split_top_level('a[title="x, y"], b') == ['a[title="x, y"]', "b"]


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


class TestPseudoClasses:
    def test_first_child(self):
        assert texts(select(LIST_HTML, "li:first-child")) == ["a"]

    def test_last_child(self):
        assert texts(select(LIST_HTML, "li:last-child")) == ["c"]

    def test_nth_child_even(self):
        assert texts(select(LIST_HTML, "li:nth-child(even)")) == ["b"]

    def test_nth_child_odd(self):
        assert texts(select(LIST_HTML, "li:nth-child(odd)")) == ["a", "c"]

    def test_nth_child_number(self):
        assert texts(select(LIST_HTML, "li:nth-child(2)")) == ["b"]

    def test_empty(self):
        nodes = select("<div><p></p><p>x</p><p><br></p></div>", "p:empty")
        assert len(nodes) == 1
        assert nodes[0].children == []

    def test_empty_none_when_all_have_children(self):
        assert select(LIST_HTML, "li:empty") == []

    def test_text_siblings_not_counted(self):
        nodes = select("<p>hi <b>x</b></p>", "b:first-child")
        assert texts(nodes) == ["x"]

    def test_node_without_parent_never_positional(self):
        assert select(LIST_HTML, "#rootContainer:first-child") == []
        assert select(LIST_HTML, "#rootContainer:nth-child(1)") == []

    def test_detached_node(self):
        engine = SelectorEngine(ElementNode(tag="li"))
        assert engine.select("li") != []
        assert engine.select("li:first-child") == []


class TestCombinators:
    HTML = "<div class='a'><p>1</p><section><p>2</p></section></div><p>3</p>"

    def test_child(self):
        assert texts(select(self.HTML, ".a > p")) == ["1"]

    def test_descendant(self):
        assert texts(select(self.HTML, ".a p")) == ["1", "2"]

    def test_long_chain(self):
        assert texts(select(self.HTML, "div section > p")) == ["2"]

    def test_nested_matches_not_duplicated(self):
        nodes = select("<div><div><p>x</p></div></div>", "div p")
        assert texts(nodes) == ["x"]

    def test_no_match(self):
        assert select(self.HTML, "ul li") == []


class TestSimpleSelectors:
    HTML = "<a id='home' class='nav big' href='/' data-k='v'>x</a><a class='nav'>y</a>"

    @pytest.mark.parametrize(
        "selector, expected",
        [
            ("a", ["x", "y"]),
            (".nav", ["x", "y"]),
            (".nav.big", ["x"]),
            ("#home", ["x"]),
            ("a#home.nav", ["x"]),
            ('[data-k="v"]', ["x"]),
            ("[data-k]", ["x"]),
            ('[data-k="w"]', []),
            ("[id=home]", ["x"]),
            ("*", ["xy", "x", "y"]),
            ("a:hover", []),
        ],
    )
    def test_match(self, selector, expected):
        assert texts(select(self.HTML, selector)) == expected

    def test_union_without_duplicates(self):
        nodes = select(self.HTML, "a, .nav, #home")
        assert texts(nodes) == ["x", "y"]
