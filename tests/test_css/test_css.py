"""Tests for the CSS parser and specificity computation."""

import pytest

from markstyle.css import CSSParser, Rule, normalize_selector, parse_inline_style, specificity


# ---------------------------------------------------------------------------
# Specificity
# ---------------------------------------------------------------------------


class TestSpecificity:
    @pytest.mark.parametrize(
        "selector, expected",
        [
            ("*", 0),
            ("div", 1),
            (".note", 10),
            ("#main", 100),
            ("div p", 2),
            ("div.a#b", 111),
            ("ul > li:first-child", 12),
            ("a::before", 2),
            ("[href]", 10),
            ('a[href="x.y"]', 11),
            ("tr:nth-child(even) td", 12),
            ("*.x", 10),
        ],
    )
    def test_values(self, selector, expected):
        assert specificity(selector) == expected


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestParse:
    def test_single_rule(self):
        rules = CSSParser("h1 { color: red; }").parse()
        assert rules == [Rule(selector="h1", declarations={"color": "red"}, specificity=1, order=0)]

    def test_grouped_selectors_share_declarations(self):
        rules = CSSParser("h1, h2 { color: red; margin: 0 }").parse()
        assert [r.selector for r in rules] == ["h1", "h2"]
        assert [r.order for r in rules] == [0, 1]
        assert all(r.declarations == {"color": "red", "margin": "0"} for r in rules)

    def test_comments_and_whitespace(self):
        source = """
        /* heading */
        h1
        {
            color : red ;   /* inline */
        }
        """
        rules = CSSParser(source).parse()
        assert len(rules) == 1
        assert rules[0].declarations == {"color": "red"}

    def test_sorted_by_specificity_then_order(self):
        rules = CSSParser("#x { a: 1; } .y { a: 2; } p { a: 3; } .z { a: 4; }").parse()
        assert [r.selector for r in rules] == ["p", ".y", ".z", "#x"]

    def test_malformed_declarations_skipped(self):
        rules = CSSParser("p { color red; margin: 0; : x; width: ; }").parse()
        assert rules[0].declarations == {"margin": "0"}

    def test_rule_without_declarations_dropped(self):
        assert CSSParser("p { } div { nonsense }").parse() == []

    def test_garbage_yields_empty_list(self):
        assert CSSParser("}}}{{{").parse() == []
        assert CSSParser(None).parse() == []

    def test_property_names_lowercased_custom_properties_kept(self):
        rules = CSSParser(":root { --Main-Color: red; COLOR: blue; }").parse()
        assert rules[0].declarations == {"--Main-Color": "red", "color": "blue"}

    def test_child_combinator_normalized(self):
        rules = CSSParser("ul>li { color: red; }").parse()
        assert rules[0].selector == "ul > li"

    def test_comma_inside_parentheses_does_not_split(self):
        rules = CSSParser('a[title="x,y"] { color: red; }').parse()
        assert len(rules) == 1

    def test_to_dict(self):
        rule = CSSParser(".a { color: red; }").parse()[0]
        assert rule.to_dict() == {"selector": ".a", "style": {"color": "red"}, "weight": 10, "index": 0}


class TestHelpers:
    def test_normalize_selector(self):
        assert normalize_selector("  div   >p  ") == "div > p"

    def test_parse_inline_style(self):
        assert parse_inline_style("color: red; margin:0;;bogus") == {"color": "red", "margin": "0"}
        assert parse_inline_style("") == {}

    def test_semicolons_inside_values(self):
        style = parse_inline_style('content: "a;b"; background: url(x;y.png); margin: 0')
        assert style == {"content": '"a;b"', "background": "url(x;y.png)", "margin": "0"}

    def test_rule_with_quoted_semicolon(self):
        rules = CSSParser("q { quotes: \"«\" \";\"; color: red; }").parse()
        assert rules[0].declarations == {"quotes": '"«" ";"', "color": "red"}
