from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Any, Dict, List

from markstyle.log import DEBUG, WARNING, log_syslog_message
from markstyle.selector import split_top_level

COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
RULE_RE = re.compile(r"([^{}]+)\{([^{}]*)\}")
COMBINATOR_RE = re.compile(r"\s*([>+~])\s*")


@dataclass(frozen=True)
class Rule:
    selector: str
    declarations: Dict[str, str]
    specificity: int
    order: int  # source order

    def to_dict(self) -> Dict[str, Any]:
        return {
            "selector": self.selector,
            "style": dict(self.declarations),
            "weight": self.specificity,
            "index": self.order,
        }


def normalize_selector(sel: str) -> str:
    sel = re.sub(r"\s+", " ", sel.strip())
    return COMBINATOR_RE.sub(r" \1 ", sel)


def _compound_parts(chunk: str) -> List[str]:
    # "div.a:hover[x]" => ["div", ".a", ":hover", "[x]"]
    parts: List[str] = []
    depth = 0
    current = ""
    for ch in chunk:
        if depth == 0 and ch in "#.:[" and current and not (ch == ":" and current == ":"):
            parts.append(current)
            current = ""
        if ch in "([":
            depth += 1
        elif ch in ")]":
            depth = max(0, depth - 1)
        current += ch
    if current:
        parts.append(current)
    return parts


def specificity(selector: str) -> int:
    ids = classes = types = 0
    for chunk in split_top_level(normalize_selector(selector), " "):
        if chunk in (">", "+", "~"):
            continue
        for part in _compound_parts(chunk):
            if part.startswith("#"):
                ids += 1
            elif part.startswith("::"):
                types += 1
            elif part[0] in ".[:":
                classes += 1
            elif part != "*":
                types += 1
    return 100 * ids + 10 * classes + types


def parse_declarations(block: str) -> Dict[str, str]:
    out: Dict[str, str] = {}
    # ";" inside quotes or url(...) belongs to the value
    for part in split_top_level(block, ";"):
        part = part.strip()
        if not part or ":" not in part:
            continue
        k, v = part.split(":", 1)
        k, v = k.strip(), v.strip()
        if not k or not v or not re.fullmatch(r"-{0,2}[A-Za-z_][\w-]*", k):
            continue
        out[k if k.startswith("--") else k.lower()] = v
    return out


class CSSParser:
    def __init__(self, source: str, verbose: bool = False) -> None:
        self.source = source or ""
        self.verbose = verbose

    def parse(self) -> List[Rule]:
        try:
            rules = self._parse()
        except Exception as exc:
            log_syslog_message(WARNING, "CSSParser", f"{exc}")
            return []
        if self.verbose:
            log_syslog_message(DEBUG, "CSSParser", f"Parsed {len(rules)} rules")
        return rules

    def _parse(self) -> List[Rule]:
        s = COMMENT_RE.sub("", self.source)
        s = re.sub(r"\s+", " ", s).strip()
        rules: List[Rule] = []
        order = 0

        for m in RULE_RE.finditer(s):
            decls = parse_declarations(m.group(2))
            if not decls:
                continue
            # selector lists: "h1,h2,p"
            for sel in split_top_level(m.group(1), ","):
                sel = normalize_selector(sel)
                rules.append(Rule(selector=sel, declarations=dict(decls),
                                  specificity=specificity(sel), order=order))
                order += 1

        rules.sort(key=lambda r: (r.specificity, r.order))
        return rules


def parse_inline_style(style_attr: str) -> Dict[str, str]:
    return parse_declarations(style_attr or "")
