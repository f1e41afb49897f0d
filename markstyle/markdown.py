"""Line-oriented Markdown to HTML conversion.

Blocks are read from a deque of lines that each block handler may consume
from. Nested constructs (blockquotes, ``:::`` fences) collect their lines
into a new deque and re-parse it with a recursive call, so every call owns
its own lines and its own list-tag stack.
"""

from __future__ import annotations
import math
import re
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional, Tuple

from markstyle.codec import CodeBlockCodec, default_codec
from markstyle.config import Settings, get_settings
from markstyle.log import DEBUG, log_syslog_message

Lines = Deque[str]

CUSTOM_FENCE_RE = re.compile(r"^:::\s*(\S.*)$")
CODE_FENCE_RE = re.compile(r"^```\s*(\S*)")
HR_RES = [
    re.compile(r"^(\*\s*){3,}$"),
    re.compile(r"^(-\s*){3,}$"),
    re.compile(r"^(_\s*){3,}$"),
]
BULLET_RE = re.compile(r"^([-+*])\s+(.*)$")
ORDERED_RE = re.compile(r"^(\d+)\.\s+(.*)$")
HEADING_RE = re.compile(r"^#{1,6}\s+")
RAW_HTML_RE = re.compile(r"^<([a-zA-Z][\w-]*)([^>]*)>")
BLOCK_STARTS = ("|", ">", "```", ":::")
SEPARATOR_RE = re.compile(r"^\|\s*:?-+:?\s*(\|\s*:?-+:?\s*)*\|$")

BULLET_CLASSES = {
    "-": "dash-bullet",
    "+": "plus-bullet",
    "*": "asterisk-bullet",
}

# inline rules, applied in this order
ESCAPE_RE = re.compile(r"\\([\\`*_{}\[\]()#+\-.!~^=|])")
CODE_RE = re.compile(r"`([^`]+)`(?!`)")
IMAGE_RE = re.compile(r'!\[([^\]]*)\]\(([^)\s]+)(?:\s+"([^"]+)")?\)')
LINK_RE = re.compile(r'\[([^\]]+)\]\(([^)\s]+)(?:\s+"([^"]+)")?\)')
INLINE_RULES = [
    (re.compile(r"\^\^([^=]+?)\^\^"), r"<sup>\1</sup>"),
    (re.compile(r"\^_(.+?)_\^"), r"<sub>\1</sub>"),
    (re.compile(r"^-{3,}$", re.M), '<hr class="dash-hr" />'),
    (re.compile(r"^\*{3,}$", re.M), '<hr class="asterisk-hr" />'),
    (re.compile(r"^_{3,}$", re.M), '<hr class="underscore-hr" />'),
    (re.compile(r"\*\*\*([^*]+)\*\*\*"),
     r'<strong class="asterisk-strong"><em class="asterisk-em">\1</em></strong>'),
    (re.compile(r"___([^_]+)___"),
     r'<strong class="underscore-strong"><em class="underscore-em">\1</em></strong>'),
    (re.compile(r"\*\*([^*]+)\*\*"), r'<strong class="asterisk-strong">\1</strong>'),
    (re.compile(r"__([^_]+)__"), r'<strong class="underscore-strong">\1</strong>'),
    (re.compile(r"\*([^*]+)\*"), r'<em class="asterisk-em">\1</em>'),
    (re.compile(r"(?<!\w)_(?!\s)([^_]+?)(?<!\s)_(?!\w)"), r'<em class="underscore-em">\1</em>'),
    (re.compile(r"~~([^~]+)~~"), r"<del>\1</del>"),
    (re.compile(r"==([^=]+)=="), r"<mark>\1</mark>"),
]
HEADING_RES = [(level, re.compile(rf"^#{{{level}}} (.+)$", re.M)) for level in range(6, 0, -1)]

TAG_STRIP_RE = re.compile(r"<[^>]+>")
PLACEHOLDER_RE = re.compile(r"%%%[A-Z]+%%%")


def slugify(text: str) -> str:
    text = PLACEHOLDER_RE.sub("", TAG_STRIP_RE.sub("", text)).lower()
    text = re.sub(r"[^a-z0-9\s-]", "", text).strip()
    return re.sub(r"\s+", "-", text)


def rewrite_hidden_tags(line: str) -> str:
    line = re.sub(r"<(?:style|template)([^>]*)>", r'<div\1 style="display:none">', line)
    return re.sub(r"</(?:style|template)>", "</div>", line)


@dataclass
class BlockContext:
    open_tags: List[str] = field(default_factory=list)
    output: List[str] = field(default_factory=list)


class MarkdownEngine:
    def __init__(self, settings: Optional[Settings] = None, codec: Optional[CodeBlockCodec] = None) -> None:
        self.settings = settings or get_settings()
        self.codec = codec or default_codec
        self.indent = max(1, self.settings.list_indent)
        self.void_tags = {t.lower() for t in self.settings.void_tags}

    def convert(self, text: str, decode: bool = True) -> str:
        if not isinstance(text, str):
            return ""
        lines: Lines = deque(text.replace("\r\n", "\n").split("\n"))
        html = "\n".join(self.parse_block(lines))
        if self.settings.verbose:
            log_syslog_message(DEBUG, "MarkdownEngine", "Success")
        return self.codec.decode(html) if decode else html

    # ---- block level ----

    def parse_block(self, lines: Lines) -> List[str]:
        ctx = BlockContext()
        while lines:
            raw = lines.popleft()
            line, indent = self._normalize(raw)

            if not line:
                self._close_lists(ctx)
                continue

            if line.startswith(":::"):
                self._close_lists(ctx)
                self._custom_fence(line, lines, ctx)
            elif line.startswith("```"):
                self._close_lists(ctx)
                self._code_fence(line, lines, ctx)
            elif line.startswith(">"):
                self._close_lists(ctx)
                self._blockquote(line, lines, ctx)
            elif any(r.match(line) for r in HR_RES):
                self._close_lists(ctx)
                ctx.output.append(self.inline(line.replace(" ", "")))
            elif BULLET_RE.match(line):
                m = BULLET_RE.match(line)
                self._list_item(ctx, "ul", indent, 1)
                bullet_class = BULLET_CLASSES.get(m.group(1), "dash-bullet")
                ctx.output.append(f'<li class="{bullet_class}">{self.inline(m.group(2).strip())}</li>')
            elif ORDERED_RE.match(line):
                m = ORDERED_RE.match(line)
                self._list_item(ctx, "ol", indent, int(m.group(1)))
                ctx.output.append(f"<li>{self.inline(m.group(2).strip())}</li>")
            elif line.startswith("|"):
                self._close_lists(ctx)
                self._table(line, lines, ctx)
            elif RAW_HTML_RE.match(line):
                self._close_lists(ctx)
                self._raw_html(line, lines, ctx)
            elif HEADING_RE.match(line):
                self._close_lists(ctx)
                ctx.output.append(self.inline(line))
            else:
                self._close_lists(ctx)
                ctx.output.append(f"<p>{self.inline(line)}</p>")

        self._close_lists(ctx)
        return ctx.output

    def _normalize(self, raw: str) -> Tuple[str, int]:
        line = rewrite_hidden_tags(raw.replace("\t", " " * self.indent))
        line = re.sub(r"^ \*", "*", line)
        line = re.sub(r"^ -", "-", line)
        lead = len(line) - len(line.lstrip(" "))
        indent = math.ceil(lead / self.indent) * self.indent
        return line.strip(), indent

    def _close_lists(self, ctx: BlockContext) -> None:
        while ctx.open_tags:
            ctx.output.append(f"</{ctx.open_tags.pop()}>")

    def _list_item(self, ctx: BlockContext, kind: str, indent: int, start: int) -> None:
        depth = indent // self.indent + 1
        stack = ctx.open_tags
        while len(stack) > depth:
            ctx.output.append(f"</{stack.pop()}>")
        if len(stack) == depth and stack[-1] != kind:
            ctx.output.append(f"</{stack.pop()}>")
        while len(stack) < depth:
            if kind == "ol" and start > 1:
                ctx.output.append(f'<ol start="{start}">')
            else:
                ctx.output.append(f"<{kind}>")
            stack.append(kind)

    def _custom_fence(self, line: str, lines: Lines, ctx: BlockContext) -> None:
        m = CUSTOM_FENCE_RE.match(line)
        if not m:
            # stray closing fence
            return
        classes = m.group(1).strip()
        hidden = ' style="display:none"' if "hidden" in classes.split() else ""

        inner: Lines = deque()
        depth = 1
        while lines:
            nxt = lines.popleft()
            stripped = nxt.strip()
            if CUSTOM_FENCE_RE.match(stripped):
                depth += 1
            elif stripped == ":::":
                depth -= 1
                if depth == 0:
                    break
            inner.append(nxt)

        ctx.output.append(f'<div class="{classes}"{hidden}>')
        ctx.output.extend(self.parse_block(inner))
        ctx.output.append("</div>")

    def _code_fence(self, line: str, lines: Lines, ctx: BlockContext) -> None:
        m = CODE_FENCE_RE.match(line)
        info = re.sub(r"[^\w-]", "", m.group(1)) or "text"
        code: List[str] = []
        while lines:
            nxt = lines.popleft()
            if nxt.strip() == "```":
                break
            code.append(f"{self.codec.encode(nxt)}<br />")
        ctx.output.append(
            f'<pre data-role="code-block" data-info="{info}" class="{info}"><code>'
            + "".join(code)
            + "</code></pre>"
        )

    def _blockquote(self, line: str, lines: Lines, ctx: BlockContext) -> None:
        inner: Lines = deque([re.sub(r"^>\s*", "", line)])
        while lines and lines[0].lstrip().startswith(">"):
            inner.append(re.sub(r"^\s*>\s?", "", lines.popleft()))
        ctx.output.append("<blockquote>")
        ctx.output.extend(self.parse_block(inner))
        ctx.output.append("</blockquote>")

    def _table(self, line: str, lines: Lines, ctx: BlockContext) -> None:
        rows = [line]
        while lines and lines[0].strip().startswith("|"):
            rows.append(lines.popleft().strip())

        if len(rows) < 2 or not SEPARATOR_RE.match(rows[1]):
            # not a table: plain paragraphs
            for row in rows:
                ctx.output.append(f"<p>{self.inline(row)}</p>")
            return

        footer = None
        if self.settings.table_footer and lines and self._is_footer_line(lines[0]):
            footer = lines.popleft().strip()
            log_syslog_message(DEBUG, "MarkdownEngine", f"Table footer taken from line: {footer}")

        headers = _cells(rows[0])
        aligns = [_alignment(a) for a in _cells(rows[1])]

        def cell(tag: str, text: str, index: int) -> str:
            align = aligns[index] if index < len(aligns) else None
            style = f' style="text-align:{align}"' if align else ""
            return f"<{tag}{style}>{self.inline(text)}</{tag}>"

        out = ctx.output
        out.append("<table>")
        out.append("<thead><tr>")
        out.extend(cell("th", h, i) for i, h in enumerate(headers))
        out.append("</tr></thead>")
        out.append("<tbody>")
        for row in rows[2:]:
            out.append("<tr>")
            out.extend(cell("td", c, i) for i, c in enumerate(_cells(row)))
            out.append("</tr>")
        out.append("</tbody>")
        if footer is not None:
            out.append("<tfoot><tr>")
            out.append(f'<td colspan="{len(headers)}">{self.inline(footer)}</td>')
            out.append("</tr></tfoot>")
        out.append("</table>")

    def _is_footer_line(self, raw: str) -> bool:
        # only plain text; a line that opens its own block is left for the block loop
        line, _ = self._normalize(raw)
        if not line or line.startswith(BLOCK_STARTS) or HEADING_RE.match(line):
            return False
        if any(r.match(line) for r in HR_RES):
            return False
        return not (BULLET_RE.match(line) or ORDERED_RE.match(line) or RAW_HTML_RE.match(line))

    def _raw_html(self, line: str, lines: Lines, ctx: BlockContext) -> None:
        m = RAW_HTML_RE.match(line)
        tag = m.group(1).lower()
        if tag in self.void_tags or m.group(2).rstrip().endswith("/"):
            ctx.output.append(line)
            return

        open_re = re.compile(rf"<{tag}(?=[\s>/])[^>]*(?<!/)>", re.I)
        close_re = re.compile(rf"</{tag}\s*>", re.I)

        collected = [line]
        depth = len(open_re.findall(line)) - len(close_re.findall(line))
        while depth > 0 and lines:
            nxt = rewrite_hidden_tags(lines.popleft())
            collected.append(nxt)
            depth += len(open_re.findall(nxt)) - len(close_re.findall(nxt))
        ctx.output.append("\n".join(collected))

    # ---- inline ----

    def inline(self, text: str) -> str:
        enc = self.codec.encode
        text = ESCAPE_RE.sub(lambda m: enc(m.group(1)), text)
        text = CODE_RE.sub(lambda m: f'<code class="inline-code">{enc(m.group(1))}</code>', text)
        text = IMAGE_RE.sub(lambda m: self._image(m, enc), text)
        text = LINK_RE.sub(lambda m: self._link(m, enc), text)
        for pattern, repl in INLINE_RULES:
            text = pattern.sub(repl, text)
        for level, pattern in HEADING_RES:
            text = pattern.sub(
                lambda m, level=level: f'<h{level} id="{slugify(m.group(1))}">{m.group(1)}</h{level}>',
                text,
            )
        return text

    @staticmethod
    def _image(m: "re.Match[str]", enc) -> str:
        title = f' title="{enc(m.group(3))}"' if m.group(3) else ""
        return f'<img src="{enc(m.group(2))}" alt="{enc(m.group(1))}"{title} />'

    @staticmethod
    def _link(m: "re.Match[str]", enc) -> str:
        title = f' title="{enc(m.group(3))}"' if m.group(3) else ""
        return f'<a href="{enc(m.group(2))}"{title}>{m.group(1)}</a>'


def _cells(row: str) -> List[str]:
    row = row.strip()
    if row.startswith("|"):
        row = row[1:]
    if row.endswith("|"):
        row = row[:-1]
    return [c.strip() for c in row.split("|")]


def _alignment(marker: str) -> Optional[str]:
    if re.fullmatch(r":-+:", marker):
        return "center"
    if re.fullmatch(r":-+", marker):
        return "left"
    if re.fullmatch(r"-+:", marker):
        return "right"
    return None
