import pytest

from gembib.decode import decode, entity_ok, utf16_to_text
from gembib.node import DocumentInfo


@pytest.fixture
def ents():
    return DocumentInfo().entities


def test_predefined_entities(ents):
    assert decode("&lt;a&gt; &amp; &quot;&apos;", ents, "&") == "<a> & \"'"


def test_character_references(ents):
    assert decode("&#65;&#x41;", ents, "&") == "AA"
    assert decode("&#233;", ents, "&") == "\u00e9"


def test_bad_character_reference_kept(ents):
    assert decode("&#0; &#65", ents, "&") == "&#0; &#65"


def test_cdata_mode_leaves_references(ents):
    assert decode("&lt;&#65;", ents, "c") == "&lt;&#65;"


def test_line_endings(ents):
    assert decode("a\r\nb\rc", ents, "&") == "a\nb\nc"


def test_attribute_whitespace(ents):
    assert decode("a\tb\nc", ents, " ") == "a b c"


def test_non_cdata_collapse(ents):
    assert decode("  a   b  ", ents, "*") == "a b"


def test_unknown_entity_kept(ents):
    assert decode("&nope;", ents, "&") == "&nope;"


def test_nested_entities():
    table = {"a;": "x&b;", "b;": "y"}
    assert decode("&a;", table, "&") == "xy"


def test_parameter_entities():
    assert decode("%p;&p;", {"p;": "v"}, "%") == "v&p;"


def test_entity_ok():
    table = {"b;": "&c;", "c;": "plain"}
    assert entity_ok("a;", "&b;", table) is True
    assert entity_ok("a;", "x&a;", table) is False
    assert entity_ok("c;", "&b;", table) is False


def test_utf16_round_trip():
    text = "<a>\u00e9</a>"
    assert utf16_to_text(text.encode("utf-16-le").join([b"\xff\xfe", b""])) == text
    assert utf16_to_text(b"\xfe\xff" + text.encode("utf-16-be")) == text


def test_utf16_not_detected():
    assert utf16_to_text(b"<a/>") is None
    assert utf16_to_text(b"") is None