from fashion_api.utils.documents import merge_document
from fashion_api.utils.pagination import pagination_meta


def test_pagination_meta():
    assert pagination_meta(12, 2, 5) == {"total": 12, "page": 2, "limit": 5, "pages": 3}
    assert pagination_meta(0, 1, 10)["pages"] == 0
    assert pagination_meta(10, 1, 10)["pages"] == 1


def test_merge_document_is_deep_and_copies():
    current = {"a": 1, "nested": {"x": 1, "y": 2}}
    merged = merge_document(current, {"nested": {"y": 3}, "b": 2})

    assert merged == {"a": 1, "b": 2, "nested": {"x": 1, "y": 3}}
    assert current == {"a": 1, "nested": {"x": 1, "y": 2}}


def test_merge_document_replaces_non_dicts():
    assert merge_document({"tags": ["a"]}, {"tags": ["b"]}) == {"tags": ["b"]}
    assert merge_document(None, {"k": 1}) == {"k": 1}
