"""Build a Gemini site from a Zefania-style Bible XML document."""

from __future__ import annotations

import argparse
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from .node import XmlNode
from .parser import XmlParseError, parse_file

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True)
class Verse:
    """One verse with the book and chapter it belongs to."""

    bname: str
    bnum: int
    cnum: int
    vnum: int
    text: str


def _atoi(value: str | None) -> int:
    match = _LEADING_INT.match(value or "")
    return int(match.group(1)) if match else 0


def _tags(parent: XmlNode, name: str) -> Iterator[XmlNode]:
    first = parent.child(name)
    if first is not None:
        yield from first.siblings()


def iter_verses(bible: XmlNode) -> Iterator[Verse]:
    """Yield every verse of the document in book, chapter and verse order."""
    for book in _tags(bible, "BIBLEBOOK"):
        bname = book.attr("bname") or ""
        bnum = _atoi(book.attr("bnumber"))
        for chap in _tags(book, "CHAPTER"):
            cnum = _atoi(chap.attr("cnumber"))
            for vers in _tags(chap, "VERS"):
                yield Verse(bname, bnum, cnum, _atoi(vers.attr("vnumber")), vers.txt)


def url_name(bname: str) -> str:
    """Return the directory name used for a book."""
    return bname.replace(" ", "_")


def _append(path: Path, text: str) -> None:
    with path.open("a", encoding="utf-8") as fp:
        fp.write(text)


def build_site(bible: XmlNode, out_dir) -> None:
    """Append the index pages and chapter pages for the document under out_dir."""
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    index = out / "index.gmi"
    pbnum = pcnum = 0

    for verse in iter_verses(bible):
        url = url_name(verse.bname)
        book_dir = out / url

        if verse.bnum != pbnum:
            if verse.bnum == 1:
                _append(index, "#King James Version\n\n\n##Old Testament\n\n")
            elif verse.bnum == 40:
                _append(index, "\n\n\n##New Testament\n\n")
            try:
                book_dir.mkdir()
            except OSError as exc:
                print(f"Error: {exc.strerror}")
            _append(index, f"=> {url}/index.gmi {verse.bname}\n")

        if verse.bnum != pbnum or verse.cnum != pcnum:
            book_index = book_dir / "index.gmi"
            if verse.cnum == 1:
                _append(book_index, f"#{verse.bname}\n")
            _append(
                book_index, f"=> Chapter_{verse.cnum}.gmi Chapter {verse.cnum}\n"
            )

        chapter = book_dir / f"Chapter_{verse.cnum}.gmi"
        lines = ""
        if verse.vnum == 1:
            lines = f"#{verse.bname}\n##Chapter {verse.cnum}\n\n"
        _append(chapter, f"{lines}{verse.vnum} {verse.text}\n\n")

        pbnum, pcnum = verse.bnum, verse.cnum


def main(argv: list[str] | None = None) -> int:
    """Build the Gemini site from a Bible XML file."""
    parser = argparse.ArgumentParser(description="Build a Gemini Bible site.")
    parser.add_argument("xmlfile", nargs="?", default="kjv.xml")
    parser.add_argument("outdir", nargs="?", default="bible")
    args = parser.parse_args(argv)

    try:
        bible = parse_file(args.xmlfile)
    except XmlParseError as exc:
        print(exc.message, file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"{args.xmlfile}: {exc.strerror}", file=sys.stderr)
        return 1

    build_site(bible, args.outdir)
    return 0