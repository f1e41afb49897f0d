from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

TEXT = "text"


class Node:
    # non-owning back-reference; children are owned by their parent's list
    parent: Optional["ElementNode"] = None


@dataclass(eq=False)
class TextNode(Node):
    text: str = ""

    @property
    def tag(self) -> str:
        return TEXT

    def to_dict(self) -> Dict[str, Any]:
        return {"element": TEXT, "text": self.text}


@dataclass(eq=False)
class ElementNode(Node):
    tag: str
    id: Optional[str] = None
    classes: List[str] = field(default_factory=list)
    inline_style: Dict[str, str] = field(default_factory=dict)
    attributes: Dict[str, str] = field(default_factory=dict)
    computed_style: Dict[str, str] = field(default_factory=dict)
    children: List[Node] = field(default_factory=list)

    def append(self, child: Node) -> None:
        child.parent = self
        self.children.append(child)

    def element_children(self) -> List["ElementNode"]:
        return [c for c in self.children if isinstance(c, ElementNode)]

    def get_attribute(self, name: str) -> Optional[str]:
        if name == "id":
            return self.id
        if name == "class":
            return " ".join(self.classes) if self.classes else None
        return self.attributes.get(name)

    def walk(self) -> List["ElementNode"]:
        """All element nodes of this subtree in document order, self first."""
        out: List[ElementNode] = []
        stack: List[ElementNode] = [self]
        while stack:
            node = stack.pop()
            out.append(node)
            stack.extend(reversed(node.element_children()))
        return out

    def text_content(self) -> str:
        parts: List[str] = []
        for child in self.children:
            if isinstance(child, TextNode):
                parts.append(child.text)
            elif isinstance(child, ElementNode):
                parts.append(child.text_content())
        return "".join(parts)

    def find_by_id(self, node_id: str) -> Optional["ElementNode"]:
        for node in self.walk():
            if node.id == node_id:
                return node
        return None

    def to_dict(self) -> Dict[str, Any]:
        attributes: Dict[str, Any] = {
            "id": self.id,
            "classList": list(self.classes),
            "inlineStyle": dict(self.inline_style),
        }
        attributes.update(self.attributes)
        return {
            "element": self.tag,
            "attributes": attributes,
            "style": dict(self.computed_style),
            "children": [c.to_dict() for c in self.children],
        }
