"""Unit tests for ProjectionCache.

Tests cover:
- Cache hits (the same document object is projected once)
- Misses for every new document version
- LRU eviction at max_size
- Returned JSON values are copies (mutating them never corrupts the cache)
- Properties (max_size and curr_size return correct values)
"""

from __future__ import annotations

from schema_tree.cache import ProjectionCache
from schema_tree.documents import JsonDocument, XmlDocument
from schema_tree.tree.nodes import Node


def _doc(*nodes: Node) -> JsonDocument:
    return JsonDocument(id="d", name="d", nodes=nodes)


class TestHitsAndMisses:
    def test_second_call_is_a_hit(self) -> None:
        cache = ProjectionCache()
        document = _doc(Node.scalar("a"))
        first = cache.project(document)
        second = cache.project(document)
        assert first == second == {"a": "example string"}
        assert cache.misses == 1
        assert cache.hits == 1

    def test_new_version_is_a_miss(self) -> None:
        cache = ProjectionCache()
        document = _doc(Node.scalar("a"))
        cache.project(document)
        cache.project(document.with_nodes((*document.nodes, Node.scalar("b"))))
        assert cache.misses == 2

    def test_equal_but_distinct_documents_are_separate_entries(self) -> None:
        cache = ProjectionCache()
        node = Node.scalar("a")
        cache.project(_doc(node))
        cache.project(_doc(node))
        assert cache.misses == 2


class TestIsolation:
    def test_mutating_result_does_not_corrupt_cache(self) -> None:
        cache = ProjectionCache()
        document = _doc(Node.scalar("a"))
        result = cache.project(document)
        result["a"] = "changed"
        assert cache.project(document) == {"a": "example string"}

    def test_xml_results_are_strings(self) -> None:
        cache = ProjectionCache(xml_indent="    ")
        document = XmlDocument(id="x", name="x", nodes=(Node.object("a", [Node.object("b")]),))
        text = cache.project(document)
        assert isinstance(text, str)
        assert "\n        <b />" in text


class TestEviction:
    def test_evicts_least_recently_used(self) -> None:
        cache = ProjectionCache(max_size=2)
        docs = [_doc(Node.scalar(f"f{i}")) for i in range(3)]
        for document in docs:
            cache.project(document)
        assert cache.curr_size == 2
        cache.project(docs[0])
        assert cache.misses == 4

    def test_properties(self) -> None:
        cache = ProjectionCache(max_size=5)
        assert cache.max_size == 5
        assert cache.curr_size == 0
        cache.project(_doc())
        assert cache.curr_size == 1

    def test_clear(self) -> None:
        cache = ProjectionCache()
        cache.project(_doc())
        cache.clear()
        assert cache.curr_size == 0
