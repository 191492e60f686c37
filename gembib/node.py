"""Tag tree for parsed XML documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator


def _default_entities() -> dict[str, str]:
    return {
        "lt;": "&#60;",
        "gt;": "&#62;",
        "quot;": "&#34;",
        "apos;": "&#39;",
        "amp;": "&#38;",
    }


@dataclass
class DocumentInfo:
    """Document-wide data kept by the root tag.

    ``entities`` maps entity names (with their trailing ``;``) to replacement
    text, in declaration order. ``default_attrs`` maps a tag name to a list of
    ``(attribute, value or None, mode)`` triples declared in ``<!ATTLIST``.
    ``pis`` maps a processing-instruction target to a list of
    ``(instruction, after_root)`` pairs.
    """

    entities: dict[str, str] = field(default_factory=_default_entities)
    default_attrs: dict[str, list[tuple[str, str | None, str]]] = field(
        default_factory=dict
    )
    pis: dict[str, list[tuple[str, bool]]] = field(default_factory=dict)
    standalone: bool = False
    error: str = ""


class XmlNode:
    """A tag with its attributes, character content and sub tags.

    Sub tags are kept in three linked orders: ``ordered`` follows document
    order, ``next_tag`` links tags of the same name, and ``sibling`` links the
    first tags of each distinct name.
    """

    def __init__(self, name: str | None = None, info: DocumentInfo | None = None):
        self.name = name
        self.attributes: dict[str, str] = {}
        self.txt = ""
        self.off = 0
        self.next_tag: XmlNode | None = None
        self.sibling: XmlNode | None = None
        self.ordered: XmlNode | None = None
        self.first: XmlNode | None = None
        self.parent: XmlNode | None = None
        self.info = info

    def __repr__(self) -> str:
        return f"XmlNode({self.name!r})"

    @property
    def document(self) -> DocumentInfo:
        """The document data held by the root tag."""
        top = self.root()
        if top.info is None:
            top.info = DocumentInfo()
        return top.info

    def root(self) -> XmlNode:
        """Return the root tag of the tree holding this tag."""
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def next(self) -> XmlNode | None:
        """Return the next tag of the same name at the same depth."""
        return self.next_tag

    def siblings(self) -> Iterator[XmlNode]:
        """Yield this tag and every later tag of the same name at this depth."""
        node: XmlNode | None = self
        while node is not None:
            yield node
            node = node.next_tag

    def children(self) -> Iterator[XmlNode]:
        """Yield the sub tags in document order."""
        node = self.first
        while node is not None:
            yield node
            node = node.ordered

    def child(self, name: str) -> XmlNode | None:
        """Return the first sub tag with the given name, or None."""
        node = self.first
        while node is not None and node.name != name:
            node = node.sibling
        return node

    def idx(self, index: int) -> XmlNode | None:
        """Return the index-th tag of this name from here; 0 is this tag."""
        node: XmlNode | None = self
        while node is not None and index:
            node = node.next_tag
            index -= 1
        return node

    def attr(self, name: str) -> str | None:
        """Return an attribute value, falling back to declared defaults."""
        if name in self.attributes:
            return self.attributes[name]
        defaults = self.document.default_attrs.get(self.name)
        if not defaults:
            return None
        for attr_name, value, _mode in defaults:
            if attr_name == name:
                return value
        return None

    def get(self, *args) -> XmlNode | None:
        """Follow alternating tag names and indexes down the tree.

        The list ends at its end, at an index below zero, or at an empty name.
        """
        node: XmlNode | None = self
        items = iter(args)
        for name in items:
            if not name:
                return node
            index = next(items, -1)
            node = node.child(name) if node is not None else None
            if index < 0:
                return node
            node = node.idx(index) if node is not None else None
        return node

    def pi(self, target: str) -> list[str]:
        """Return the processing instructions recorded for a target."""
        return [text for text, _after in self.document.pis.get(target, [])]

    def error(self) -> str:
        """Return the parser error message, or an empty string."""
        top = self.root()
        return top.info.error if top.info is not None else ""

    def add_child(self, name: str, off: int) -> XmlNode:
        """Add a new sub tag at an offset into this tag's content."""
        return XmlNode(name).insert(self, off)

    def set_txt(self, txt: str) -> XmlNode:
        """Set the character content and return this tag."""
        self.txt = txt
        return self

    def set_attr(self, name: str, value: str | None) -> XmlNode:
        """Set or add an attribute; a value of None removes it."""
        if value is None:
            self.attributes.pop(name, None)
        else:
            self.attributes[name] = value
        return self

    def cut(self) -> XmlNode:
        """Unlink this tag and its sub tags from their parent's lists."""
        if self.next_tag is not None:
            self.next_tag.sibling = self.sibling

        parent = self.parent
        if parent is not None:
            cur = parent.first
            if cur is self:
                parent.first = self.ordered
            else:
                while cur.ordered is not self:
                    cur = cur.ordered
                cur.ordered = self.ordered

                cur = parent.first
                if cur.name != self.name:
                    while cur.sibling.name != self.name:
                        cur = cur.sibling
                    if cur.sibling is self:
                        cur.sibling = (
                            self.next_tag
                            if self.next_tag is not None
                            else cur.sibling.sibling
                        )
                    else:
                        cur = cur.sibling

                while cur.next_tag is not None and cur.next_tag is not self:
                    cur = cur.next_tag
                if cur.next_tag is not None:
                    cur.next_tag = cur.next_tag.next_tag

        self.ordered = self.sibling = self.next_tag = None
        return self

    def insert(self, dest: XmlNode, off: int) -> XmlNode:
        """Place this tag under dest at an offset into dest's content."""
        self.next_tag = self.sibling = self.ordered = None
        self.off = off
        self.parent = dest

        head = dest.first
        if head is None:
            dest.first = self
            return self

        if head.off <= off:
            cur = head
            while cur.ordered is not None and cur.ordered.off <= off:
                cur = cur.ordered
            self.ordered = cur.ordered
            cur.ordered = self
        else:
            self.ordered = head
            dest.first = self

        cur, prev = head, None
        while cur is not None and cur.name != self.name:
            prev, cur = cur, cur.sibling

        if cur is not None and cur.off <= off:
            while cur.next_tag is not None and cur.next_tag.off <= off:
                cur = cur.next_tag
            self.next_tag = cur.next_tag
            cur.next_tag = self
        else:
            if prev is not None and cur is not None:
                prev.sibling = cur.sibling
            self.next_tag = cur
            cur, prev = head, None
            while cur is not None and cur.off <= off:
                prev, cur = cur, cur.sibling
            self.sibling = cur
            if prev is not None:
                prev.sibling = self
        return self

    def move(self, dest: XmlNode, off: int) -> XmlNode:
        """Cut this tag and insert it under dest at the given offset."""
        return self.cut().insert(dest, off)