from __future__ import annotations
import re
from typing import Callable, Dict, Mapping, Optional, Union

PLACEHOLDER_RE = re.compile(r"\{\{\s*([\w.-]+)\s*\}\}")

Source = Union[str, Callable[[Mapping[str, str]], str]]


def replace_placeholders(text: str, expressions: Mapping[str, object]) -> str:
    """Fill ``{{ name }}`` from ``expressions``; unknown names are left as-is."""
    def sub(m: "re.Match[str]") -> str:
        key = m.group(1)
        return str(expressions[key]) if key in expressions else m.group(0)

    return PLACEHOLDER_RE.sub(sub, text)


def default_template(expressions: Mapping[str, object]) -> str:
    rows = []
    for index, (key, value) in enumerate(expressions.items()):
        row_class = "even-row" if index % 2 == 0 else "odd-row"
        rows.append(f'<tr class="{row_class}"><td>{key}</td><td>{value}</td></tr>')
    return (
        '<table class="default-table">'
        "<thead><tr><th>Key</th><th>Value</th></tr></thead>"
        f"<tbody>{''.join(rows)}</tbody>"
        '<tfoot><tr><td colspan="2">End of Data</td></tr></tfoot>'
        "</table>"
    )


DEFAULT_THEME = """
.default-table { border-collapse: collapse; width: 100%; }
.default-table th { text-align: left; padding: 8px; }
.default-table td { padding: 8px; }
.default-table .even-row { background-color: #d9f7d1; }
"""


class Registry:
    """Named themes (CSS) and templates (HTML).

    Construct one per application (or per test); nothing here is global.
    """

    def __init__(self) -> None:
        self._themes: Dict[str, Source] = {}
        self._templates: Dict[str, Source] = {}
        self.reset()

    def reset(self) -> None:
        self._themes = {"default": DEFAULT_THEME}
        self._templates = {"default": default_template}

    def add_theme(self, name: str, css: Source) -> None:
        self._themes[name] = css

    def add_template(self, name: str, html: Source) -> None:
        self._templates[name] = html

    def has_theme(self, name: str) -> bool:
        return name in self._themes

    def has_template(self, name: str) -> bool:
        return name in self._templates

    def get_theme(self, name: str = "default", expressions: Optional[Mapping[str, object]] = None) -> str:
        return self._render(self._themes[name], expressions or {})

    def get_template(self, name: str = "default", expressions: Optional[Mapping[str, object]] = None) -> str:
        return self._render(self._templates[name], expressions or {})

    @staticmethod
    def _render(source: Source, expressions: Mapping[str, object]) -> str:
        text = source(expressions) if callable(source) else source
        return replace_placeholders(text, expressions)
