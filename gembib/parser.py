"""Parser building an XmlNode tree from XML text."""

from __future__ import annotations

from typing import BinaryIO, TextIO

from .decode import decode, entity_ok, utf16_to_text
from .node import DocumentInfo, XmlNode

_WS = "\t\r\n "
_SPACE = " \t\n\r\v\f"
_ERR_LEN = 127


class XmlParseError(ValueError):
    """Raised when the document is not well formed.

    ``line`` is the line near the problem and ``root`` the partial tree.
    """

    def __init__(self, message: str, line: int, root: XmlNode):
        super().__init__(message)
        self.message = message
        self.line = line
        self.root = root


def _skip(s: str, i: int, chars: str) -> int:
    n = len(s)
    while i < n and s[i] in chars:
        i += 1
    return i


def _scan(s: str, i: int, chars: str) -> int:
    n = len(s)
    while i < n and s[i] not in chars:
        i += 1
    return i


def _starts_tag(ch: str) -> bool:
    return (ch.isascii() and ch.isalpha()) or ch in "_:" or ord(ch) >= 0x80


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.info = DocumentInfo()
        self.root = XmlNode(None, info=self.info)
        self.cur: XmlNode | None = self.root

    def fail(self, message: str, pos: int) -> XmlParseError:
        line = self.text.count("\n", 0, max(pos, 0)) + 1
        full = f"[error near line {line}]: {message}"[:_ERR_LEN]
        self.info.error = full
        return XmlParseError(full, line, self.root)

    def open_tag(self, name: str, attrs: dict[str, str]) -> None:
        node = self.cur
        if node.name is not None:
            node = node.add_child(name, len(node.txt))
        else:
            node.name = name
        node.attributes = attrs
        self.cur = node

    def close_tag(self, name: str, pos: int) -> None:
        if self.cur is None or self.cur.name is None or self.cur.name != name:
            raise self.fail(f"unexpected closing tag </{name}>", pos)
        self.cur = self.cur.parent

    def char_content(self, s: str, mode: str) -> None:
        node = self.cur
        if node is None or node.name is None or not s:
            return
        node.txt += decode(s, self.info.entities, mode)

    def proc_inst(self, s: str) -> None:
        end = _scan(s, 0, _WS)
        target = s[:end]
        rest = s[_skip(s, end + 1, _WS):] if end < len(s) else ""
        if target == "xml":
            idx = rest.find("standalone")
            if idx >= 0:
                k = _skip(rest, idx + 10, _WS + "='\"")
                if rest.startswith("yes", k):
                    self.info.standalone = True
            return
        after_root = self.root.name is not None
        self.info.pis.setdefault(target, []).append((rest, after_root))

    def internal_dtd(self, start: int, stop: int) -> None:
        s = self.text[start:stop]
        n = len(s)
        entities = self.info.entities
        pe: dict[str, str] = {}
        i = 0
        while True:
            i = _scan(s, i, "<%")
            if i >= n:
                break
            if s.startswith("<!ENTITY", i):
                i = _skip(s, i + 8, _WS)
                is_pe = i < n and s[i] == "%"
                nstart = _skip(s, i, _WS + "%")
                nend = _scan(s, nstart, _WS)
                name = s[nstart:nend] + ";"
                v = _skip(s, nend + 1, _WS)
                q = s[v] if v < n else ""
                if q not in ('"', "'"):
                    j = s.find(">", nend)
                    if j < 0:
                        break
                    i = j
                    continue
                vstart = v + 1
                vend = s.find(q, vstart)
                if vend < 0:
                    raw, i = s[vstart:], n
                else:
                    raw, i = s[vstart:vend], vend + 1
                table = pe if is_pe else entities
                value = decode(raw, pe, "%")
                if not entity_ok(name, value, table):
                    raise self.fail(
                        f"circular entity declaration &{name}", start + vstart
                    )
                table.setdefault(name, value)
            elif s.startswith("<!ATTLIST", i):
                t = _skip(s, i + 9, _WS)
                if t >= n:
                    raise self.fail("unclosed <!ATTLIST", start + t)
                tend = _scan(s, t, _WS + ">")
                if tend < n and s[tend] == ">":
                    i = tend
                    continue
                if tend >= n:
                    raise self.fail("malformed <!ATTLIST", start + t)
                tag = s[t:tend]
                i = tend
                while True:
                    a = _skip(s, i + 1, _WS)
                    if a >= n or s[a] == ">":
                        i = a
                        break
                    aend = _scan(s, a, _WS)
                    if aend >= n:
                        raise self.fail("malformed <!ATTLIST", start + t)
                    aname = s[a:aend]
                    p = _skip(s, aend + 1, _WS)
                    mode = " " if s.startswith("CDATA", p) else "*"
                    if s.startswith("NOTATION", p):
                        p = _skip(s, p + 8, _WS)
                    if p < n and s[p] == "(":
                        p = s.find(")", p)
                        if p < 0:
                            raise self.fail("malformed <!ATTLIST", start + t)
                    else:
                        p = _scan(s, p, _WS)
                    p = _skip(s, p, _WS + ")")
                    if s.startswith("#FIXED", p):
                        p = _skip(s, p + 6, _WS)
                    value: str | None
                    if p < n and s[p] == "#":
                        p = _scan(s, p, _WS + ">") - 1
                        if mode == " ":
                            i = p
                            continue
                        value = None
                    elif p < n and s[p] in "\"'" and (
                        close := s.find(s[p], p + 1)
                    ) >= 0:
                        value = decode(s[p + 1:close], entities, mode)
                        p = close
                    else:
                        raise self.fail("malformed <!ATTLIST", start + t)
                    self.info.default_attrs.setdefault(tag, []).append(
                        (aname, value, mode)
                    )
                    i = p
            elif s.startswith("<!--", i):
                j = s.find("-->", i + 4)
                if j < 0:
                    break
                i = j
            elif s.startswith("<?", i):
                j = s.find("?>", i + 2)
                if j < 0:
                    break
                self.proc_inst(s[i + 2:j])
                i = j + 1
            elif s[i] == "<":
                j = s.find(">", i)
                if j < 0:
                    break
                i = j
            else:
                i += 1
                if not self.info.standalone:
                    break

    def parse_attributes(self, d: int, i: int) -> tuple[dict[str, str], int]:
        text = self.text
        n = len(text)
        tag = text[d:_scan(text, d, _WS + "/>")]
        defaults = self.info.default_attrs.get(tag, [])
        attrs: dict[str, str] = {}
        while i < n and text[i] not in "/>":
            aend = _scan(text, i, _WS + "=/>")
            aname = text[i:aend]
            value = ""
            i = aend
            if i < n and (text[i] == "=" or text[i] in _SPACE):
                i = _skip(text, i + 1, _WS + "=")
                q = text[i] if i < n else ""
                if q in ('"', "'"):
                    close = text.find(q, i + 1)
                    if close < 0:
                        raise self.fail(f"missing {q}", d)
                    mode = next(
                        (m for a, _v, m in defaults if a == aname), " "
                    )
                    value = decode(text[i + 1:close], self.info.entities, mode)
                    i = close + 1
            attrs.setdefault(aname, value)
            i = _skip(text, i, _SPACE)
        return attrs, i

    def parse(self) -> XmlNode:
        text = self.text
        n = len(text)
        if not n:
            raise self.fail("root tag missing", 0)
        pos = text.find("<")
        if pos < 0:
            raise self.fail("root tag missing", n)
        d = pos
        while True:
            d = pos + 1
            ch = text[d] if d < n else ""
            if ch and _starts_tag(ch):
                if self.cur is None:
                    raise self.fail("markup outside of root element", d)
                name_end = _scan(text, d, _WS + "/>")
                name = text[d:name_end]
                i = _skip(text, name_end, _SPACE)
                attrs, i = self.parse_attributes(d, i)
                if i < n and text[i] == "/":
                    if i + 1 >= n or text[i + 1] != ">":
                        raise self.fail("missing >", d)
                    self.open_tag(name, attrs)
                    self.close_tag(name, i)
                    pos = i + 1
                elif i < n and text[i] == ">":
                    self.open_tag(name, attrs)
                    pos = i
                else:
                    raise self.fail("missing >", d)
            elif ch == "/":
                d += 1
                end = _scan(text, d, _WS + ">")
                if end >= n:
                    raise self.fail("missing >", d)
                self.close_tag(text[d:end], end)
                pos = _skip(text, end, _WS) if text[end] in _SPACE else end
            elif text.startswith("!--", d):
                j = text.find("--", d + 3)
                if j < 0 or j + 2 >= n or text[j + 2] != ">":
                    raise self.fail("unclosed <!--", d)
                pos = j + 2
            elif text.startswith("![CDATA[", d):
                j = text.find("]]>", d)
                if j < 0:
                    raise self.fail("unclosed <![CDATA[", d)
                self.char_content(text[d + 8:j], "c")
                pos = j + 2
            elif text.startswith("!DOCTYPE", d):
                i = d
                inner = False
                while i < n:
                    c = text[i]
                    if not inner and c == ">":
                        break
                    if inner and c == "]":
                        k = _skip(text, i + 1, _WS)
                        if k < n and text[k] == ">":
                            break
                    if c == "[":
                        inner = True
                    i = _scan(text, i + 1, "[]>")
                if i >= n:
                    raise self.fail("unclosed <!DOCTYPE", d)
                if inner:
                    self.internal_dtd(text.index("[", d) + 1, i)
                    pos = _skip(text, i + 1, _WS)
                else:
                    pos = i
            elif ch == "?":
                j = text.find("?>", d)
                if j < 0:
                    raise self.fail("unclosed <?", d)
                self.proc_inst(text[d + 1:j])
                pos = j + 1
            else:
                raise self.fail("unexpected <", d)

            pos += 1
            if pos >= n:
                break
            d = pos
            if text[pos] != "<":
                j = text.find("<", pos)
                if j < 0:
                    break
                self.char_content(text[pos:j], "&")
                pos = j

        if self.cur is None:
            return self.root
        if self.cur.name is None:
            raise self.fail("root tag missing", d)
        raise self.fail(f"unclosed tag <{self.cur.name}>", d)


def parse_string(text: str) -> XmlNode:
    """Parse XML text and return the root tag."""
    return _Parser(text).parse()


def parse_bytes(data: bytes) -> XmlNode:
    """Parse XML bytes, UTF-16 with a byte order mark or else UTF-8."""
    text = utf16_to_text(data)
    if text is None:
        text = data.decode("utf-8", errors="replace")
    return parse_string(text)


def parse_file(path) -> XmlNode:
    """Read and parse an XML file."""
    with open(path, "rb") as fp:
        return parse_bytes(fp.read())


def parse_stream(fp: BinaryIO | TextIO) -> XmlNode:
    """Read a whole stream and parse it."""
    data = fp.read()
    if isinstance(data, str):
        return parse_string(data)
    return parse_bytes(data)