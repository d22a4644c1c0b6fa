from geneagraph.models.graph import EdgeOut, GraphOut, NodeOut, SearchRequest


def test_graph_model():
    g = GraphOut(
        nodes=[NodeOut(id="1339", label="Bach", size=2, color="rgb(125,125,255)", x=1, y=2, wiki_url="https://en.m.wikipedia.org/wiki/Bach")],
        edges=[EdgeOut(id="REV-Q1339$x", source="2000", target="1339", label="Wife of")],
    )
    assert g.nodes[0].size == 2
    assert g.edges[0].type == "arrow"


def test_search_request_model():
    r = SearchRequest(id="Q1339")
    assert r.id == "Q1339"
