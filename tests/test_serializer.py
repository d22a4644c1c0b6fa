import asyncio
import random
from collections import Counter

from geneagraph.services.crawl.base import Edge
from geneagraph.services.crawl.frontier import crawl
from geneagraph.services.graph.serializer import UNKNOWN_COLOUR, serialize_graph


def _graph(make_fetcher, seed="1339", cap=10, fail=()):
    ctx = asyncio.run(crawl(seed, make_fetcher(fail=fail), max_nodes=cap))
    return ctx, serialize_graph(ctx, rng=random.Random(7))


def _assert_invariants(graph):
    node_ids = {n.id for n in graph.nodes}
    # every edge endpoint is a node
    for e in graph.edges:
        assert e.source in node_ids and e.target in node_ids
    # no duplicate edges
    ids = [e.id for e in graph.edges]
    assert len(ids) == len(set(ids))
    # weight is the in-degree over kept edges, at least 1
    in_degree = Counter(e.target for e in graph.edges)
    for n in graph.nodes:
        assert n.weight == (in_degree[n.id] or 1)


def test_seed_family_graph(make_fetcher):
    _, graph = _graph(make_fetcher)
    _assert_invariants(graph)

    nodes = {n.id: n for n in graph.nodes}
    assert set(nodes) == {"1339", "2000", "2001", "2002"}
    assert nodes["1339"].color == "rgb(125,125,255)"
    assert nodes["2000"].color == "rgb(255,125,125)"
    assert nodes["2001"].color == UNKNOWN_COLOUR
    assert nodes["2001"].weight == 4
    assert nodes["2002"].weight == 1
    assert nodes["1339"].weight == 2

    edges = {e.id: e for e in graph.edges}
    assert edges["Q1339$child1"].label == "Father of"
    assert edges["Q1339$child2"].label == "Father of"
    assert edges["Q2000$child1"].label == "Mother of"


def test_spouse_edges_run_both_ways(make_fetcher):
    _, graph = _graph(make_fetcher)
    spouse_labels = {"Husband of", "Wife of", "Spouse of"}
    pairs = {(e.source, e.target) for e in graph.edges if e.label in spouse_labels}
    assert ("1339", "2000") in pairs
    for source, target in pairs:
        assert (target, source) in pairs
    edges = {e.id: e for e in graph.edges}
    assert edges["Q1339$spouse"].label == "Husband of"
    assert edges["REV-Q1339$spouse"].label == "Wife of"


def test_failed_id_is_absent_from_nodes_and_edges(make_fetcher):
    ctx, graph = _graph(make_fetcher, fail={"2002"})
    _assert_invariants(graph)
    assert "2002" in ctx.failed
    assert "2002" not in {n.id for n in graph.nodes}
    assert all("2002" not in (e.source, e.target) for e in graph.edges)


def test_capped_graph_only_keeps_resolved_nodes(make_fetcher):
    _, graph = _graph(make_fetcher, cap=3)
    _assert_invariants(graph)
    assert [n.id for n in graph.nodes] == ["1339"]
    assert graph.edges == []


def test_seed_without_statements_gives_single_node(make_fetcher):
    _, graph = _graph(make_fetcher, seed="2002")
    assert [n.id for n in graph.nodes] == ["2002"]
    assert graph.nodes[0].weight == 1
    assert graph.edges == []


def test_duplicate_edges_are_dropped(make_fetcher):
    ctx = asyncio.run(crawl("1339", make_fetcher(), max_nodes=10))
    dup = Edge(id="Q1339$spouse", source="1339", target="2000", label="Husband of")
    ctx.edges.append(dup)
    graph = serialize_graph(ctx)
    _assert_invariants(graph)
    assert len(graph.edges) == 9


def test_to_dict_shape(make_fetcher):
    _, graph = _graph(make_fetcher)
    data = graph.to_dict()
    node = next(n for n in data["nodes"] if n["id"] == "1339")
    assert set(node) == {"id", "label", "size", "color", "x", "y", "wiki_url"}
    assert node["label"] == "Stub President"
    assert node["wiki_url"].startswith("https://en.m.wikipedia.org/wiki/")
    assert 0 <= node["x"] < 10 and 0 <= node["y"] < 10
    edge = data["edges"][0]
    assert set(edge) == {"id", "source", "target", "label", "type"}
    assert edge["type"] == "arrow"
