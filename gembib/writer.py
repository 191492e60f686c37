"""Serialisation of XmlNode trees back to XML text."""

from __future__ import annotations

import argparse
import sys

from .node import XmlNode
from .parser import XmlParseError, parse_file

_PLAIN = {"&": "&amp;", "<": "&lt;", ">": "&gt;", "\r": "&#xD;"}
_ATTRIBUTE = {**_PLAIN, '"': "&quot;", "\n": "&#xA;", "\t": "&#x9;"}


def amp_encode(s: str, attribute: bool = False) -> str:
    """Escape markup characters; attribute values also escape quotes and whitespace.

    Encoding stops at the first NUL character.
    """
    table = _ATTRIBUTE if attribute else _PLAIN
    text = s.split("\0", 1)[0]
    return "".join(table.get(ch, ch) for ch in text)


def _render(node: XmlNode, out: list[str], defaults: dict) -> None:
    out.append(f"<{node.name}")
    for name, value in node.attributes.items():
        out.append(f' {name}="{amp_encode(value, True)}"')

    seen: set[str] = set()
    for name, value, _mode in defaults.get(node.name, ()):
        first = name not in seen
        seen.add(name)
        if not first or value is None or name in node.attributes:
            continue
        out.append(f' {name}="{amp_encode(value, True)}"')
    out.append(">")

    if node.first is None:
        out.append(amp_encode(node.txt))
    else:
        _render_children(node, out, defaults)
    out.append(f"</{node.name}>")


def _render_children(node: XmlNode, out: list[str], defaults: dict) -> None:
    txt = node.txt
    start = 0
    for child in node.children():
        out.append(amp_encode(txt[start:child.off]))
        _render(child, out, defaults)
        start = min(child.off, len(txt))
    out.append(amp_encode(txt[start:]))


def _pis(node: XmlNode, after_root: bool) -> list[tuple[str, str]]:
    return [
        (target, text)
        for target, entries in node.document.pis.items()
        for text, after in entries
        if after == after_root
    ]


def to_xml(node: XmlNode | None) -> str:
    """Return the XML text for a tag and its sub tags.

    For a root tag, processing instructions from before and after the root
    element are written as well.
    """
    if node is None or node.name is None:
        return ""
    out: list[str] = []
    is_root = node.parent is None

    if is_root:
        for target, text in _pis(node, False):
            out.append(f"<?{target}{' ' if text else ''}{text}?>\n")

    _render(node, out, node.document.default_attrs)

    if is_root:
        for target, text in _pis(node, True):
            out.append(f"\n<?{target}{' ' if text else ''}{text}?>")
    return "".join(out)


def main(argv: list[str] | None = None) -> int:
    """Parse an XML file, print it back out and report any parse error."""
    parser = argparse.ArgumentParser(description="Parse and re-serialise XML.")
    parser.add_argument("xmlfile")
    args = parser.parse_args(argv)

    try:
        root = parse_file(args.xmlfile)
    except XmlParseError as exc:
        print(to_xml(exc.root))
        print(exc.message, file=sys.stderr, end="")
        return 1
    except OSError as exc:
        print()
        print(f"{args.xmlfile}: {exc.strerror}", file=sys.stderr)
        return 1

    print(to_xml(root))
    return 0