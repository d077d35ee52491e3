import pytest
from hal_client import HalClientError, Representation, RepresentationSet


def _repr(href, **extra):
    return Representation(parsed_json={"_links": {"self": {"href": href}}, **extra})


def test_sequence_behaviour():
    a, b, c = _repr("/a"), _repr("/b"), _repr("/c")
    rs = RepresentationSet([a, b, c])

    assert len(rs) == 3
    assert list(rs) == [a, b, c]
    assert rs[1] is b
    assert isinstance(rs[:2], RepresentationSet)
    assert rs[:2].hrefs == ["/a", "/b"]
    assert rs.first is a
    assert b in rs


def test_empty_set():
    rs = RepresentationSet()
    assert len(rs) == 0
    assert rs.first is None
    assert rs.hrefs == []
    assert not rs.includes_href("/a")


def test_includes_href():
    rs = RepresentationSet([_repr("/a"), _repr("/b")])
    assert rs.includes_href("/b")
    assert not rs.includes_href("/z")


def test_related_flattens_in_order_and_skips_missing():
    first = Representation(
        parsed_json={"_embedded": {"item": [{"_links": {"self": {"href": "/1"}}}, {"_links": {"self": {"href": "/2"}}}]}}
    )
    second = _repr("/empty")
    third = Representation(parsed_json={"_embedded": {"item": {"_links": {"self": {"href": "/3"}}}}})

    rs = RepresentationSet([first, second, third]).related("item")
    assert rs.hrefs == ["/1", "/2", "/3"]


def test_post_requires_exactly_one_member():
    with pytest.raises(HalClientError):
        RepresentationSet([_repr("/a"), _repr("/b")]).post("abc")
    with pytest.raises(HalClientError):
        RepresentationSet().post("abc")


def test_repr_lists_hrefs():
    assert repr(RepresentationSet([_repr("/a")])) == "<RepresentationSet ['/a']>"
