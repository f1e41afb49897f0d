from __future__ import annotations
import re
from typing import Dict, List, Optional

from markstyle.config import Settings, get_settings
from markstyle.dom import ElementNode, Node, TextNode
from markstyle.log import DEBUG, ERROR, log_syslog_message

CAMEL_RE = re.compile(r"([A-Z])")


def kebab_case(key: str) -> str:
    if key.startswith("--"):
        return key
    return CAMEL_RE.sub(r"-\1", key).lower()


def style_to_string(style: Dict[str, str]) -> str:
    return " ".join(f"{kebab_case(k)}: {v};" for k, v in style.items())


def _quote(value: str) -> str:
    return value.replace('"', "&quot;")


class HTMLSerializer:
    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self.void_tags = {t.lower() for t in self.settings.void_tags}

    def serialize(self, root: Node) -> str:
        try:
            out = self._node(root)
        except Exception as exc:
            log_syslog_message(ERROR, "HTMLSerializer", f"{exc}")
            return self.settings.serializer_error_html
        if self.settings.verbose:
            log_syslog_message(DEBUG, "HTMLSerializer", "Success")
        return out

    def _node(self, node: Node) -> str:
        if isinstance(node, TextNode):
            return node.text
        if not isinstance(node, ElementNode):
            raise TypeError(f"Cannot serialize {type(node).__name__}")

        attrs: List[str] = []
        style = style_to_string({**node.computed_style, **node.inline_style})
        if style:
            attrs.append(f'style="{_quote(style)}"')
        if node.classes:
            attrs.append(f'class="{_quote(" ".join(node.classes))}"')
        if node.id:
            attrs.append(f'id="{_quote(node.id)}"')
        for key, value in node.attributes.items():
            attrs.append(f'{key}="{_quote(value)}"')

        open_tag = node.tag + "".join(" " + a for a in attrs)
        if not node.children and node.tag in self.void_tags:
            return f"<{open_tag} />"
        inner = "".join(self._node(c) for c in node.children)
        return f"<{open_tag}>{inner}</{node.tag}>"
