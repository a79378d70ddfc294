"""SVG scene graph used as the vector rendering target.

Charts are composed as a tree of :class:`SvgElement` nodes and serialised
deterministically (sorted attributes, fixed float precision) so identical
geometry always yields byte-identical output.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

SVG_NS = "http://www.w3.org/2000/svg"

__all__ = ["SVG_NS", "SvgDocument", "SvgElement", "fmt"]


def fmt(value: float) -> str:
    """Format a coordinate with at most two decimals and no trailing zeros."""

    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def _attr_name(key: str) -> str:
    if key == "class_":
        return "class"
    return key.replace("_", "-")


@dataclass
class SvgElement:
    """A single SVG node with string attributes and ordered children."""

    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List["SvgElement"] = field(default_factory=list)
    text: Optional[str] = None

    def set(self, **attrs: object) -> "SvgElement":
        """Assign attributes (``stroke_width`` becomes ``stroke-width``).

        ``None`` values are skipped; floats are written with :func:`fmt`.
        """

        for key, value in attrs.items():
            if value is None:
                continue
            if isinstance(value, bool):
                value = str(value).lower()
            elif isinstance(value, float):
                value = fmt(value)
            self.attributes[_attr_name(key)] = str(value)
        return self

    def add(self, *children: "SvgElement") -> "SvgElement":
        self.children.extend(children)
        return self

    def child(self, tag: str, text: Optional[str] = None, **attrs: object) -> "SvgElement":
        """Create, append and return a new child element."""

        element = SvgElement(tag, text=text).set(**attrs)
        self.children.append(element)
        return element

    def iter(self) -> Iterator["SvgElement"]:
        yield self
        for child in self.children:
            yield from child.iter()

    def find_all(self, tag: Optional[str] = None, class_: Optional[str] = None) -> List["SvgElement"]:
        found = []
        for node in self.iter():
            if tag is not None and node.tag != tag:
                continue
            if class_ is not None and class_ not in node.attributes.get("class", "").split():
                continue
            found.append(node)
        return found

    def to_string(self, indent: int = 0, pretty: bool = True) -> str:
        pad = "  " * indent if pretty else ""
        child_pad = "  " * (indent + 1) if pretty else ""
        attrs = "".join(f" {name}={_quote(value)}" for name, value in sorted(self.attributes.items()))
        if not self.children and self.text is None:
            return f"{pad}<{self.tag}{attrs}/>"
        joiner = "\n" if pretty else ""
        parts: List[str] = [f"{pad}<{self.tag}{attrs}>"]
        if self.text is not None:
            parts.append(f"{child_pad}{_escape(self.text)}")
        for child in self.children:
            parts.append(child.to_string(indent + 1, pretty=pretty))
        parts.append(f"{pad}</{self.tag}>")
        return joiner.join(parts)


def _quote(value: str) -> str:
    return f'"{_escape(value)}"'


def _escape(value: str) -> str:
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


@dataclass
class SvgDocument:
    """Root ``<svg>`` scene with an optional opaque background."""

    width: float
    height: float
    background: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)
    root: SvgElement = field(init=False)

    def __post_init__(self) -> None:
        self.root = SvgElement("svg").set(
            xmlns=SVG_NS,
            width=float(self.width),
            height=float(self.height),
            viewBox=f"0 0 {fmt(self.width)} {fmt(self.height)}",
        )
        if self.metadata:
            meta = self.root.child("metadata")
            for key, value in sorted(self.metadata.items()):
                meta.child("meta", key=key, value=str(value))
        if self.background:
            self.root.child(
                "rect",
                class_="background",
                x=0,
                y=0,
                width=float(self.width),
                height=float(self.height),
                fill=self.background,
            )

    def group(self, **attrs: object) -> SvgElement:
        """Create a ``<g>`` attached to the root and return it."""

        return self.root.child("g", **attrs)

    def add(self, element: SvgElement) -> SvgElement:
        self.root.add(element)
        return element

    def find_all(self, tag: Optional[str] = None, class_: Optional[str] = None) -> List[SvgElement]:
        return self.root.find_all(tag, class_)

    def snapshot(self) -> "SvgDocument":
        """Deep copy detached from later mutations of this scene."""

        return copy.deepcopy(self)

    def to_string(self, pretty: bool = True) -> str:
        return self.root.to_string(indent=0, pretty=pretty)

    def to_bytes(self, pretty: bool = True) -> bytes:
        return self.to_string(pretty=pretty).encode("utf-8")
