"""Tests for the cascade and :root custom properties."""

from markstyle.css import CSSParser
from markstyle.html import HTMLParser
from markstyle.style import StyleEngine, resolve_variables, split_root_rules


def cascade(css: str, html: str):
    root = HTMLParser(html).parse()
    return StyleEngine(CSSParser(css).parse()).apply(root)


def first(root):
    return root.element_children()[0]


# ---------------------------------------------------------------------------
# Cascade
# ---------------------------------------------------------------------------


class TestCascade:
    def test_id_beats_class_beats_tag_regardless_of_order(self):
        css = "#x { color: green; } .y { color: blue; } p { color: red; }"
        root = cascade(css, '<p id="x" class="y">t</p>')
        assert first(root).computed_style == {"color": "green"}

    def test_class_beats_tag(self):
        root = cascade(".y { color: blue; } p { color: red; }", '<p class="y">t</p>')
        assert first(root).computed_style["color"] == "blue"

    def test_equal_specificity_later_wins(self):
        root = cascade(".a { color: red; } .b { color: blue; }", '<p class="a b">t</p>')
        assert first(root).computed_style["color"] == "blue"

    def test_declarations_merge(self):
        root = cascade("p { color: red; } .a { margin: 0; }", '<p class="a">t</p>')
        assert first(root).computed_style == {"color": "red", "margin": "0"}

    def test_unmatched_rules_leave_style_empty(self):
        root = cascade("h1 { color: red; }", "<p>t</p>")
        assert first(root).computed_style == {}

    def test_inline_style_untouched_by_rules(self):
        root = cascade("p { color: red; }", '<p style="color: blue">t</p>')
        p = first(root)
        assert p.inline_style == {"color": "blue"}
        assert p.computed_style == {"color": "red"}

    def test_no_rules(self):
        root = StyleEngine([]).apply(HTMLParser("<p>t</p>").parse())
        assert first(root).computed_style == {}


# ---------------------------------------------------------------------------
# Custom properties
# ---------------------------------------------------------------------------


class TestVariables:
    def test_chained_resolution(self):
        css = ":root { --a: var(--b); --b: red; } p { color: var(--a); }"
        assert first(cascade(css, "<p>t</p>")).computed_style == {"color": "red"}

    def test_direct_cycle_keeps_literal(self):
        css = ":root { --a: var(--b); --b: var(--a); } p { color: var(--a); }"
        assert first(cascade(css, "<p>t</p>")).computed_style == {"color": "var(--a)"}

    def test_indirect_cycle_keeps_literal(self):
        css = ":root { --x: var(--y); --y: var(--z); --z: var(--x); } p { color: var(--x); }"
        assert first(cascade(css, "<p>t</p>")).computed_style == {"color": "var(--x)"}

    def test_unknown_variable_stays_literal(self):
        css = ":root { --a: red; } p { color: var(--nope); }"
        assert first(cascade(css, "<p>t</p>")).computed_style == {"color": "var(--nope)"}

    def test_variable_inside_larger_value(self):
        css = ":root { --w: 2px; } p { border: var(--w) solid black; }"
        assert first(cascade(css, "<p>t</p>")).computed_style == {"border": "2px solid black"}

    def test_inline_style_variables_resolved(self):
        root = cascade(":root { --c: teal; }", '<p style="color: var(--c)">t</p>')
        assert first(root).inline_style == {"color": "teal"}

    def test_root_properties_land_on_container(self):
        root = cascade(":root { --c: teal; background: var(--c); }", "<p>t</p>")
        assert root.id == "rootContainer"
        assert root.computed_style == {"background": "teal"}
        assert first(root).computed_style == {}

    def test_variables_not_copied_to_styles(self):
        root = cascade(":root { --c: teal; }", "<p>t</p>")
        assert root.computed_style == {}


class TestHelpers:
    def test_resolve_variables(self):
        assert resolve_variables("var( --a )", {"--a": "1"}) == "1"
        assert resolve_variables("calc(var(--a) + var(--b))", {"--a": "1", "--b": "2"}) == "calc(1 + 2)"
        assert resolve_variables("plain", {}) == "plain"

    def test_split_root_rules(self):
        rules = CSSParser(":root { --a: 1; color: red; } p { margin: 0; }").parse()
        variables, root_props, remaining = split_root_rules(rules)
        assert variables == {"--a": "1"}
        assert root_props == {"color": "red"}
        assert [r.selector for r in remaining] == ["p"]
