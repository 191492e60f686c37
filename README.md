# gembib

gembib is a small XML toolkit with no dependencies. It also does one practical job.

* **A parser** (`gembib.parser`) reads UTF-8 input, or UTF-16 input that starts
  with a byte-order mark. It decodes character and entity references and reads
  an internal DTD subset: `<!ENTITY>` declarations and `<!ATTLIST>` defaults.
  It records processing instructions. When the document is not well formed, it
  raises `XmlParseError` with a line number.
* **An editable tree** of `XmlNode` objects (`gembib.node`). You can walk it by
  tag name, add children, set text and attributes, and cut tags out or move them.
* **A writer** (`gembib.writer`) turns a tree back into XML text.
* **A Gemini capsule builder** (`gembib.gemini`) turns a Bible in XML form into a
  directory of gemtext pages. The XML uses `BIBLEBOOK` / `CHAPTER` / `VERS`
  elements with `bname`, `bnumber`, `cnumber` and `vnumber` attributes.

## Installation

```
pip install .
```

To run the test suite as well:

```
pip install ".[test]"
pytest
```

## Parsing

```python
from gembib.parser import parse_string, XmlParseError
from gembib.writer import to_xml

library = parse_string(
    '<library><shelf><book id="a"><title>One</title></book>'
    '<book id="b"><title>Two</title></book></shelf></library>'
)

shelf = library.child("shelf")
first = shelf.child("book")
print(first.attr("id"))                       # a
print(first.next().attr("id"))                # b
print(shelf.child("book").idx(1).attr("id"))  # b
print([b.attr("id") for b in first.siblings()])  # ['a', 'b']

# Alternating names and indexes: the second book's title
title = library.get("shelf", 0, "book", 1, "title")
print(to_xml(title))                          # <title>Two</title>

try:
    parse_string("<a><b></a>")
except XmlParseError as exc:
    print(exc)  # [error near line 1]: unexpected closing tag </a>
    print(exc.line, exc.root)
```

The parser has four entry points:

* `parse_string(text)` parses a string.
* `parse_bytes(data)` parses bytes. UTF-16 with a byte-order mark is decoded as such, and anything else is decoded as UTF-8.
* `parse_stream(fp)` reads a whole binary or text file object.
* `parse_file(path)` reads and parses a file.

Each one returns the root `XmlNode`. `XmlParseError` carries three things:

* `message`, the error text.
* `line`, the line near the problem.
* `root`, the partly built tree.

The same message is stored in the document and returned by the tree's `error()`.

A few other lookups are available on any `XmlNode`:

* `attr(name)` falls back to the defaults declared with `<!ATTLIST` in the document.
* `pi(target)` returns the processing instructions recorded for a target.
* `children()` yields the sub tags in document order.
* `root()` returns the root tag.

`gembib.decode` holds the lower-level helpers the parser uses: `decode`, `entity_ok` and `utf16_to_text`.

## Building and editing trees

```python
from gembib.parser import parse_string
from gembib.writer import to_xml

doc = parse_string("<root>hello</root>")
item = doc.add_child("item", 5)
item.set_txt("world")
item.set_attr("lang", "en")
print(to_xml(doc))   # <root>hello<item lang="en">world</item></root>

item.set_attr("lang", None)   # None removes the attribute
item.cut()                    # unlink the tag and its sub tags
```

The offset given to `add_child`, `insert` and `move` is a position in the
parent's character content. The tag is written at that position when the tree
is turned back into XML.

`to_xml(node)` has two more behaviours:

* It escapes markup characters through `amp_encode`.
* For a root tag, it also writes the processing instructions that came before and after the root element.

Nothing is indented or reformatted.

## Commands

Check an XML file and write it back out:

```
gembib-xml library.xml
```

The document goes to standard output. If parsing fails, the partial tree is
printed and the error message goes to standard error. The exit status is 1 on
any error and 0 otherwise.

Build a Gemini capsule from a Bible XML file:

```
gembib-gemini [xmlfile] [outdir]
```

`xmlfile` defaults to `kjv.xml` and `outdir` to `bible`. The command writes three kinds of page:

* `outdir/index.gmi` links every book. A "King James Version" / "Old Testament" heading is written before book 1, and a "New Testament" heading before book 40.
* `outdir/<Book_Name>/index.gmi` links each chapter of a book.
* `outdir/<Book_Name>/Chapter_<n>.gmi` holds the numbered verses.

Spaces in book names become underscores, as `url_name` gives them.

All pages are appended to, so running the command twice into the same directory
duplicates their content. If a book directory already exists, an error line is
printed and the pages are still written.

From Python, the same work is done by `gembib.gemini.build_site(bible, out_dir)`.
`iter_verses(bible)` yields one `Verse` (`bname`, `bnum`, `cnum`, `vnum`,
`text`) per verse of a parsed document.

## What it does not do

The parser is forgiving rather than strict:

* It does not validate against a DTD.
* It does not load external entities or external DTD subsets.
* It does not handle namespaces.
* It reads only UTF-8 and UTF-16 input.

The capsule builder knows only the `BIBLEBOOK` / `CHAPTER` / `VERS` layout
described above.