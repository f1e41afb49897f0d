"""String-in, string-out entry points wiring the parsers together."""

from __future__ import annotations
from typing import List, Mapping, Optional

from markstyle.codec import CodeBlockCodec, default_codec
from markstyle.config import Settings, get_settings
from markstyle.css import CSSParser, Rule
from markstyle.dom import ElementNode
from markstyle.html import HTMLParser
from markstyle.markdown import MarkdownEngine
from markstyle.registry import Registry
from markstyle.serialize import HTMLSerializer
from markstyle.style import StyleEngine


def css_to_rules(css_text: str, settings: Optional[Settings] = None) -> List[Rule]:
    settings = settings or get_settings()
    return CSSParser(css_text, verbose=settings.verbose).parse()


def html_to_ast(html_text: str, settings: Optional[Settings] = None) -> ElementNode:
    return HTMLParser(html_text, settings=settings).parse()


def apply_cascade(rules: List[Rule], ast: ElementNode, settings: Optional[Settings] = None) -> ElementNode:
    return StyleEngine(rules, settings=settings).apply(ast)


def ast_to_html(ast: ElementNode, settings: Optional[Settings] = None) -> str:
    return HTMLSerializer(settings=settings).serialize(ast)


def markdown_to_html(markdown_text: str, settings: Optional[Settings] = None,
                     codec: Optional[CodeBlockCodec] = None) -> str:
    return MarkdownEngine(settings=settings, codec=codec).convert(markdown_text)


def render(css_text: str, html_text: str, settings: Optional[Settings] = None,
           codec: Optional[CodeBlockCodec] = None) -> str:
    """Parse both inputs, cascade, serialize, then decode code placeholders."""
    codec = codec or default_codec
    rules = css_to_rules(css_text, settings)
    ast = apply_cascade(rules, html_to_ast(html_text, settings), settings)
    return codec.decode(ast_to_html(ast, settings))


def render_markdown(markdown_text: str, css_text: str = "", settings: Optional[Settings] = None,
                    codec: Optional[CodeBlockCodec] = None) -> str:
    codec = codec or default_codec
    html = MarkdownEngine(settings=settings, codec=codec).convert(markdown_text, decode=False)
    return render(css_text, html, settings, codec)


def render_template(registry: Registry, template: str = "default", theme: str = "default",
                    expressions: Optional[Mapping[str, object]] = None,
                    settings: Optional[Settings] = None) -> str:
    expressions = expressions or {}
    return render(
        registry.get_theme(theme, expressions),
        registry.get_template(template, expressions),
        settings,
    )
