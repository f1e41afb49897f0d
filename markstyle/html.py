from __future__ import annotations
import re
from typing import Dict, List, Optional

from markstyle.config import Settings, get_settings
from markstyle.css import parse_inline_style
from markstyle.dom import ElementNode, TextNode
from markstyle.errors import MalformedHTMLError
from markstyle.log import DEBUG, ERROR, log_syslog_message

COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
TAG_RE = re.compile(r"<(/?)([a-zA-Z][\w-]*)([^>]*)>")
ATTR_RE = re.compile(r'([a-zA-Z_:][-a-zA-Z0-9_:.]*)\s*=\s*(".*?"|\'.*?\'|[^\s"\'>]+)')
RAW_TEXT_TAGS = {"script", "style"}  # do not parse inner tags


def fallback_tree(settings: Optional[Settings] = None) -> ElementNode:
    settings = settings or get_settings()
    root = ElementNode(tag="div", id=settings.root_id)
    heading = ElementNode(tag="h1")
    heading.append(TextNode(text=settings.malformed_html_message))
    root.append(heading)
    return root


class HTMLParser:
    def __init__(self, source: str, settings: Optional[Settings] = None) -> None:
        self.source = source or ""
        self.settings = settings or get_settings()
        self.void_tags = {t.lower() for t in self.settings.void_tags}

    def parse(self) -> ElementNode:
        try:
            root = self._parse()
        except MalformedHTMLError as exc:
            log_syslog_message(
                ERROR, "HTMLParser",
                f"Invalid Argument: {exc}. Ensure HTML is well-formed.",
            )
            return fallback_tree(self.settings)
        if self.settings.verbose:
            log_syslog_message(DEBUG, "HTMLParser", "Success")
        return root

    def _parse(self) -> ElementNode:
        source = COMMENT_RE.sub("", self.source)
        root = ElementNode(tag="div", id=self.settings.root_id)
        stack: List[ElementNode] = [root]

        i = 0
        while True:
            m = TAG_RE.search(source, i)
            if not m:
                self._emit_text(stack[-1], source[i:])
                break

            start, end = m.span()

            # text before
            if start > i:
                self._emit_text(stack[-1], source[i:start])

            closing, tag, attr_text = m.group(1), m.group(2).lower(), m.group(3)
            i = end

            if closing:
                if tag in self.void_tags:
                    continue
                if len(stack) == 1:
                    raise MalformedHTMLError(f"Unexpected closing tag </{tag}>", tag)
                # any closing tag pops the innermost open element
                stack.pop()
                continue

            self_closing = attr_text.rstrip().endswith("/")
            if self_closing:
                attr_text = attr_text.rstrip()[:-1]
            el = self._make_element(tag, attr_text)
            stack[-1].append(el)

            if self_closing or tag in self.void_tags:
                continue

            stack.append(el)

            # RAW TEXT: consume directly until closing tag
            if tag in RAW_TEXT_TAGS:
                close_pat = f"</{tag}>"
                close_idx = source.lower().find(close_pat, i)
                if close_idx == -1:
                    raise MalformedHTMLError(f"Unclosed <{tag}> element", tag)
                raw = source[i:close_idx]
                if raw:
                    el.append(TextNode(text=raw))
                i = close_idx + len(close_pat)
                stack.pop()

        if len(stack) != 1:
            raise MalformedHTMLError(
                f"Unclosed HTML tags detected: {', '.join(n.tag for n in stack[1:])}",
                stack[-1].tag,
            )
        return self._adopt_serialized_root(root)

    def _adopt_serialized_root(self, root: ElementNode) -> ElementNode:
        # re-parsing serializer output must not nest a second root
        if len(root.children) == 1:
            only = root.children[0]
            if isinstance(only, ElementNode) and only.tag == "div" and only.id == self.settings.root_id:
                only.parent = None
                return only
        return root

    def _make_element(self, tag: str, attr_text: str) -> ElementNode:
        el = ElementNode(tag=tag)
        for name, value in self._parse_attrs(attr_text).items():
            if name == "style":
                el.inline_style = parse_inline_style(value)
            elif name == "class":
                el.classes = value.split()
            elif name == "id":
                el.id = value
            else:
                el.attributes[name] = value
        return el

    def _emit_text(self, parent: ElementNode, text: str) -> None:
        if not text:
            return
        # collapse whitespace
        t = re.sub(r"\s+", " ", text)
        if t.strip():
            parent.append(TextNode(text=t))

    def _parse_attrs(self, s: str) -> Dict[str, str]:
        attrs: Dict[str, str] = {}
        # supports key="value" / key='value' / key=value
        for k, v in ATTR_RE.findall(s):
            v = v.strip()
            if len(v) >= 2 and ((v[0] == '"' and v[-1] == '"') or (v[0] == "'" and v[-1] == "'")):
                v = v[1:-1]
            # the serializer escapes only double quotes
            attrs[k.lower()] = v.replace("&quot;", '"')
        return attrs
