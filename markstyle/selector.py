from __future__ import annotations
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from markstyle.dom import ElementNode

NONE = "none"
DESCENDANT = "descendant"
CHILD = "child"

ATTR_RE = re.compile(
    r"""\[\s*([\w-]+)\s*(?:=\s*(?:"([^"]*)"|'([^']*)'|([^\]\s]+))\s*)?\]"""
)
ID_RE = re.compile(r"#([\w-]+)")
CLASS_RE = re.compile(r"\.([\w-]+)")
NTH_RE = re.compile(r":nth-child\(\s*(odd|even|\d+)\s*\)")
CHILD_COMBINATOR_RE = re.compile(r"\s*>\s*")


@dataclass
class Pseudo:
    nth_child: Optional[Union[str, int]] = None
    first_child: bool = False
    last_child: bool = False
    empty: bool = False

    def is_positional(self) -> bool:
        return self.first_child or self.last_child or self.nth_child is not None


@dataclass
class Segment:
    tag: Optional[str] = None
    id: Optional[str] = None
    classes: List[str] = field(default_factory=list)
    # None value means presence-only: [attr]
    attributes: Dict[str, Optional[str]] = field(default_factory=dict)
    pseudo: Pseudo = field(default_factory=Pseudo)


@dataclass
class ChainStep:
    combinator: str
    segment: Segment


Chain = List[ChainStep]


def split_top_level(text: str, sep: str = ",") -> List[str]:
    """Split on ``sep`` outside of (...) and [...] and quotes."""
    parts: List[str] = []
    depth = 0
    quote: Optional[str] = None
    start = 0
    for i, ch in enumerate(text):
        if quote:
            if ch == quote:
                quote = None
            continue
        if ch in "\"'":
            quote = ch
        elif ch in "([":
            depth += 1
        elif ch in ")]":
            depth = max(0, depth - 1)
        elif depth == 0 and (ch == sep or (sep == " " and ch.isspace())):
            parts.append(text[start:i])
            start = i + 1
    parts.append(text[start:])
    return [p.strip() for p in parts if p.strip()]


def parse_segment(text: str) -> Segment:
    seg = Segment()
    working = text.strip()

    for m in ATTR_RE.finditer(working):
        value = next((g for g in m.groups()[1:] if g is not None), None)
        seg.attributes[m.group(1)] = value
    working = ATTR_RE.sub("", working)

    m = ID_RE.search(working)
    if m:
        seg.id = m.group(1)
        working = working[:m.start()] + working[m.end():]

    seg.classes = CLASS_RE.findall(working)
    working = CLASS_RE.sub("", working)

    if ":first-child" in working:
        seg.pseudo.first_child = True
        working = working.replace(":first-child", "")
    if ":last-child" in working:
        seg.pseudo.last_child = True
        working = working.replace(":last-child", "")
    if ":empty" in working:
        seg.pseudo.empty = True
        working = working.replace(":empty", "")
    m = NTH_RE.search(working)
    if m:
        val = m.group(1)
        seg.pseudo.nth_child = val if val in ("odd", "even") else int(val)
        working = NTH_RE.sub("", working)

    # leftover => tag; unsupported pseudo-classes stay here and never match
    leftover = working.strip()
    if leftover and leftover != "*":
        seg.tag = leftover.lower()
    return seg


def parse_chain(group: str) -> Optional[Chain]:
    normalized = CHILD_COMBINATOR_RE.sub(" > ", group.strip())
    chain: Chain = []
    pending = NONE
    for token in split_top_level(normalized, " "):
        if token == ">":
            pending = CHILD
            continue
        if token in ("+", "~"):
            # sibling combinators are not supported
            return None
        if chain and pending == NONE:
            pending = DESCENDANT
        chain.append(ChainStep(combinator=pending, segment=parse_segment(token)))
        pending = NONE
    return chain or None


def parse_selector(selector: str) -> List[Chain]:
    chains: List[Chain] = []
    for group in split_top_level(selector, ","):
        chain = parse_chain(group)
        if chain:
            chains.append(chain)
    return chains


def segment_matches(seg: Segment, node: ElementNode) -> bool:
    if seg.tag and node.tag.lower() != seg.tag:
        return False
    if seg.id and node.id != seg.id:
        return False
    for cls in seg.classes:
        if cls not in node.classes:
            return False
    for key, expected in seg.attributes.items():
        actual = node.get_attribute(key)
        if actual is None:
            return False
        if expected is not None and actual != expected:
            return False

    pseudo = seg.pseudo
    if pseudo.empty and node.children:
        return False
    if pseudo.is_positional():
        parent = node.parent
        if parent is None:
            return False
        siblings = parent.element_children()
        idx = next((i for i, s in enumerate(siblings) if s is node), -1)
        if idx < 0:
            return False
        if pseudo.first_child and idx != 0:
            return False
        if pseudo.last_child and idx != len(siblings) - 1:
            return False
        nth = pseudo.nth_child
        if nth == "odd" and idx % 2 != 0:
            return False
        if nth == "even" and idx % 2 != 1:
            return False
        if isinstance(nth, int) and idx != nth - 1:
            return False
    return True


def _unique(nodes: List[ElementNode]) -> List[ElementNode]:
    seen = set()
    out: List[ElementNode] = []
    for n in nodes:
        if id(n) not in seen:
            seen.add(id(n))
            out.append(n)
    return out


class SelectorEngine:
    def __init__(self, root: ElementNode) -> None:
        self.root = root
        self._all = root.walk()

    def select(self, selector: str) -> List[ElementNode]:
        matched: List[ElementNode] = []
        for chain in parse_selector(selector):
            matched.extend(self.match_chain(chain))
        return _unique(matched)

    def match_chain(self, chain: Chain) -> List[ElementNode]:
        first = chain[0].segment
        current = [n for n in self._all if segment_matches(first, n)]

        for step in chain[1:]:
            candidates: List[ElementNode] = []
            for node in current:
                if step.combinator == CHILD:
                    candidates.extend(node.element_children())
                else:
                    candidates.extend(node.walk()[1:])
            current = [n for n in _unique(candidates) if segment_matches(step.segment, n)]
            if not current:
                break
        return current
