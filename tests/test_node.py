import pytest

from gembib.node import DocumentInfo, XmlNode


@pytest.fixture
def library():
    lib = XmlNode("library")
    shelf0 = lib.add_child("shelf", 0)
    shelf1 = lib.add_child("shelf", 1)
    books = [shelf0.add_child("book", i) for i in range(3)]
    titles = [b.add_child("title", 0).set_txt(f"t{i}") for i, b in enumerate(books)]
    return lib, [shelf0, shelf1], books, titles


def test_new_root_is_empty():
    node = XmlNode("library")
    assert node.name == "library"
    assert node.txt == ""
    assert node.parent is None
    assert node.root() is node
    assert list(node.children()) == []


def test_document_has_default_entities():
    info = XmlNode("a").document
    assert info.entities["lt;"] == "&#60;"
    assert info.entities["amp;"] == "&#38;"
    assert info.standalone is False


def test_child_next_and_idx(library):
    lib, shelves, books, _ = library
    assert lib.child("shelf") is shelves[0]
    assert shelves[0].next() is shelves[1]
    assert shelves[1].next() is None
    assert books[0].idx(0) is books[0]
    assert books[0].idx(2) is books[2]
    assert books[0].idx(3) is None
    assert lib.child("missing") is None


def test_siblings_follow_same_name(library):
    _, _, books, _ = library
    assert list(books[0].siblings()) == books
    assert list(books[1].siblings()) == books[1:]


def test_children_in_offset_order():
    root = XmlNode("r")
    a = root.add_child("a", 5)
    b = root.add_child("b", 0)
    c = root.add_child("c", 7)
    assert list(root.children()) == [b, a, c]
    assert root.first is b
    assert root.child("a") is a
    assert root.child("c") is c


def test_insert_earlier_same_name_becomes_first():
    root = XmlNode("r")
    other = root.add_child("y", 0)
    late = root.add_child("x", 5)
    early = root.add_child("x", 1)
    assert root.child("x") is early
    assert early.next() is late
    assert list(root.children()) == [other, early, late]


def test_get_walks_path(library):
    lib, _, _, titles = library
    assert lib.get("shelf", 0, "book", 2, "title", -1) is titles[2]
    assert lib.get("shelf", 0, "book", 1, "title", 0, "") is titles[1]
    assert lib.get("shelf", 1, "book", 0, "title", -1) is None
    assert lib.get("shelf", 5, "book", 0) is None


def test_get_negative_index_returns_child(library):
    lib, shelves, _, _ = library
    assert lib.get("shelf", -1) is shelves[0]
    assert lib.get("") is lib


def test_set_txt_returns_self(library):
    _, _, _, titles = library
    assert titles[0].txt == "t0"
    assert titles[0].set_txt("new") is titles[0]
    assert titles[0].txt == "new"


def test_set_attr_add_update_remove():
    node = XmlNode("book")
    assert node.set_attr("id", "1") is node
    node.set_attr("lang", "en")
    node.set_attr("id", "2")
    assert node.attr("id") == "2"
    assert list(node.attributes) == ["id", "lang"]
    node.set_attr("id", None)
    assert node.attr("id") is None
    assert list(node.attributes) == ["lang"]
    node.set_attr("absent", None)
    assert list(node.attributes) == ["lang"]


def test_attr_falls_back_to_defaults(library):
    lib, _, books, _ = library
    lib.document.default_attrs["book"] = [("lang", "en", " "), ("kind", None, "*")]
    assert books[1].attr("lang") == "en"
    assert books[1].attr("kind") is None
    assert books[1].attr("other") is None
    books[1].set_attr("lang", "fr")
    assert books[1].attr("lang") == "fr"
    assert lib.attr("lang") is None


def test_pi_lookup_through_root(library):
    lib, _, books, _ = library
    lib.document.pis["app"] = [("one", False), ("two", True)]
    assert lib.pi("app") == ["one", "two"]
    assert books[0].pi("app") == ["one", "two"]
    assert lib.pi("none") == []


def test_error_read_from_root(library):
    lib, _, books, _ = library
    assert books[0].error() == ""
    lib.document.error = "bad"
    assert books[2].error() == "bad"


def test_explicit_info_is_used():
    info = DocumentInfo(error="oops")
    node = XmlNode("r", info=info)
    child = node.add_child("c", 0)
    assert child.document is info
    assert child.error() == "oops"


def test_cut_middle_tag():
    root = XmlNode("r")
    a1 = root.add_child("a", 0)
    b = root.add_child("b", 1)
    a2 = root.add_child("a", 2)
    assert b.cut() is b
    assert list(root.children()) == [a1, a2]
    assert root.child("b") is None
    assert a1.next() is a2
    assert b.next() is None and b.ordered is None


def test_cut_later_same_name_tag():
    root = XmlNode("r")
    a1 = root.add_child("a", 0)
    b = root.add_child("b", 1)
    a2 = root.add_child("a", 2)
    a2.cut()
    assert list(root.children()) == [a1, b]
    assert a1.next() is None
    assert root.child("b") is b


def test_move_between_parents():
    root = XmlNode("r")
    src = root.add_child("src", 0)
    dest = root.add_child("dest", 1)
    item = src.add_child("item", 0)
    assert item.move(dest, 0) is item
    assert src.child("item") is None
    assert dest.child("item") is item
    assert item.parent is dest
    assert list(dest.children()) == [item]
    assert item.root() is root