"""Reversible placeholder encoding for code content.

Code spans and fenced blocks are encoded into ``%%%NAME%%%`` tokens so that
later inline Markdown rules, the HTML tokenizer's whitespace collapsing and
attribute syntax cannot reinterpret them. Decoding turns the tokens into
HTML entities.
"""

from __future__ import annotations
from typing import Any, List, Tuple

# (character, placeholder name, decoded form); "&" must be encoded first
CODE_TABLE: List[Tuple[str, str, str]] = [
    ("&", "AMPERSAND", "&amp;"),
    ("<", "LESSTHAN", "&lt;"),
    (">", "GREATERTHAN", "&gt;"),
    ('"', "QUOTE", "&quot;"),
    ("'", "APOSTROPHE", "&#39;"),
    (" ", "SPACE", " "),
    ("\n", "NEWLINE", "\n"),
    ("\t", "TAB", "\t"),
    ("=", "EQUAL", "&#61;"),
    ("*", "ASTERISK", "&#42;"),
    ("_", "UNDERSCORE", "&#95;"),
    ("~", "TILDE", "&#126;"),
    ("`", "BACKTICK", "&#96;"),
    ("-", "DASH", "&#45;"),
    ("^", "CARET", "&#94;"),
    ("$", "DOLLAR", "&#36;"),
    ("[", "LBRACKET", "&#91;"),
    ("]", "RBRACKET", "&#93;"),
    ("{", "LCURLY", "&#123;"),
    ("}", "RCURLY", "&#125;"),
    ("(", "LPAREN", "&#40;"),
    (")", "RPAREN", "&#41;"),
    ("#", "HASH", "&#35;"),
    ("|", "PIPE", "&#124;"),
    ("!", "BANG", "&#33;"),
    ("\\", "BACKSLASH", "&#92;"),
]


def _token(name: str) -> str:
    return f"%%%{name}%%%"


class CodeBlockCodec:
    def __init__(self, table: List[Tuple[str, str, str]] = CODE_TABLE) -> None:
        self.table = table
        self._encode_map = {ch: _token(name) for ch, name, _ in table}

    def encode(self, text: Any) -> Any:
        if not isinstance(text, str):
            return text
        return "".join(self._encode_map.get(ch, ch) for ch in text)

    def decode(self, text: Any) -> Any:
        if not isinstance(text, str):
            return text
        for _, name, decoded in self.table:
            text = text.replace(_token(name), decoded)
        return text


default_codec = CodeBlockCodec()


def encode_code_block(text: Any) -> Any:
    return default_codec.encode(text)


def decode_code_block(text: Any) -> Any:
    return default_codec.decode(text)
