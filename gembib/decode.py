"""Entity decoding, whitespace normalisation and UTF-16 input conversion."""

from __future__ import annotations

import re
from typing import Mapping

_SPACE = " \t\n\r\v\f"
_CHAR_REF = re.compile(r"&#(?:x([0-9A-Fa-f]+)|([0-9]+));")


def _char_ref(text: str, pos: int) -> tuple[str, int] | None:
    """Return the character and end index of a character reference at pos."""
    match = _CHAR_REF.match(text, pos)
    if match is None:
        return None
    hex_digits, dec_digits = match.groups()
    code = int(hex_digits, 16) if hex_digits is not None else int(dec_digits)
    if not code or code > 0x10FFFF:
        return None
    return chr(code), match.end()


def decode(s: str, entities: Mapping[str, str], mode: str) -> str:
    """Decode entity and character references and normalise line endings.

    ``entities`` maps names, each ending in ``;``, to replacement text.
    ``mode`` is ``'&'`` for general entities, ``'%'`` for parameter entities,
    ``'c'`` for CDATA sections, ``' '`` for attribute normalisation and
    ``'*'`` for non-CDATA attribute normalisation. Replacement text is
    decoded again, so nested references resolve.
    """
    text = s.replace("\r\n", "\n").replace("\r", "\n")
    out: list[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if mode != "c" and text.startswith("&#", i):
            found = _char_ref(text, i)
            if found is None:
                out.append(ch)
                i += 1
            else:
                out.append(found[0])
                i = found[1]
            continue
        if (ch == "&" and mode in "& *") or (ch == "%" and mode == "%"):
            for name, value in entities.items():
                if text.startswith(name, i + 1):
                    end = text.find(";", i)
                    text = value + text[end + 1:]
                    i = 0
                    break
            else:
                out.append(ch)
                i += 1
            continue
        if mode in " *" and ch in _SPACE:
            out.append(" ")
        else:
            out.append(ch)
        i += 1

    result = "".join(out)
    if mode == "*":
        result = " ".join(part for part in result.split(" ") if part)
    return result


def entity_ok(name: str, s: str, entities: Mapping[str, str]) -> bool:
    """Return False if s refers, directly or through entities, to name."""
    pos = s.find("&")
    while pos >= 0:
        if s.startswith(name, pos + 1):
            return False
        for ent_name, value in entities.items():
            if s.startswith(ent_name, pos + 1):
                if not entity_ok(name, value, entities):
                    return False
                break
        pos = s.find("&", pos + 1)
    return True


def utf16_to_text(data: bytes) -> str | None:
    """Decode UTF-16 data that starts with a byte order mark.

    Returns None when the data does not start with one.
    """
    if not data:
        return None
    if data[0] == 0xFE:
        codec = "utf-16-be"
    elif data[0] == 0xFF:
        codec = "utf-16-le"
    else:
        return None
    body = data[2:]
    body = body[: len(body) - len(body) % 2]
    return body.decode(codec, errors="replace")