from __future__ import annotations
import re
from typing import Dict, FrozenSet, List, Optional, Tuple

from markstyle.config import Settings, get_settings
from markstyle.css import Rule
from markstyle.dom import ElementNode
from markstyle.log import DEBUG, ERROR, log_syslog_message
from markstyle.selector import SelectorEngine

ROOT_SELECTOR = ":root"
VAR_RE = re.compile(r"var\(\s*(--[\w-]+)\s*\)")


class _CyclicVariable(Exception):
    pass


def resolve_variables(value: str, variables: Dict[str, str]) -> str:
    """Substitute ``var(--x)`` references from ``variables``.

    Unknown names stay as their literal ``var(--x)``. A reference whose
    resolution runs into a cycle stays as its own literal text.
    """
    def top_level(m: "re.Match[str]") -> str:
        try:
            return _resolve_name(m.group(1), variables, frozenset()) or m.group(0)
        except _CyclicVariable:
            return m.group(0)

    return VAR_RE.sub(top_level, value)


def _resolve_name(name: str, variables: Dict[str, str], resolving: FrozenSet[str]) -> Optional[str]:
    if name in resolving:
        raise _CyclicVariable(name)
    if name not in variables:
        return None
    inner = resolving | {name}

    def nested(m: "re.Match[str]") -> str:
        return _resolve_name(m.group(1), variables, inner) or m.group(0)

    return VAR_RE.sub(nested, variables[name])


def split_root_rules(rules: List[Rule]) -> Tuple[Dict[str, str], Dict[str, str], List[Rule]]:
    variables: Dict[str, str] = {}
    root_props: Dict[str, str] = {}
    remaining: List[Rule] = []
    for rule in rules:
        if rule.selector != ROOT_SELECTOR:
            remaining.append(rule)
            continue
        for key, value in rule.declarations.items():
            if key.startswith("--"):
                variables[key] = value
            else:
                root_props[key] = value
    return variables, root_props, remaining


class StyleEngine:
    def __init__(self, rules: List[Rule], settings: Optional[Settings] = None) -> None:
        self.rules = rules or []
        self.settings = settings or get_settings()

    def apply(self, root: ElementNode) -> ElementNode:
        try:
            self._apply(root)
        except Exception as exc:
            log_syslog_message(ERROR, "StyleEngine", f"{exc}")
            return root
        if self.settings.verbose:
            log_syslog_message(DEBUG, "StyleEngine", "Success")
        return root

    def _apply(self, root: ElementNode) -> None:
        variables, root_props, rules = split_root_rules(self.rules)

        container = root.find_by_id(self.settings.root_id)
        if container is not None and root_props:
            self._merge(container, root_props, variables)

        engine = SelectorEngine(root)
        # rules are pre-sorted by (specificity, order): last write wins
        for rule in rules:
            for node in engine.select(rule.selector):
                self._merge(node, rule.declarations, variables)

        if variables:
            for node in root.walk():
                for key, value in node.inline_style.items():
                    node.inline_style[key] = resolve_variables(value, variables)

    def _merge(self, node: ElementNode, declarations: Dict[str, str], variables: Dict[str, str]) -> None:
        for key, value in declarations.items():
            node.computed_style[key] = resolve_variables(value, variables)
