import json
import os
import random
import tempfile

from geneagraph.config import CrawlSettings
from geneagraph.services.crawl import runner
from geneagraph.services.crawl.pipeline import write_graph_json
from geneagraph.services.family_tree_service import build_family_graph


def test_write_graph_json():
    graph = {"nodes": [{"id": "1", "label": "Zoë"}], "edges": []}
    with tempfile.TemporaryDirectory() as tmpdir:
        out = write_graph_json(graph, out_dir=os.path.join(tmpdir, "graphs"), filename_prefix="family-1")
        assert os.path.isfile(out)
        assert os.path.basename(out).startswith("family-1-")
        with open(out, "r", encoding="utf-8") as f:
            assert json.load(f) == graph


def test_cli_crawl_writes_graph(monkeypatch, make_fetcher):
    async def _build(person_id, *, settings=None, **kwargs):
        return await build_family_graph(person_id, settings=CrawlSettings(max_nodes=10), fetcher=make_fetcher(), rng=random.Random(3))

    monkeypatch.setattr(runner, "build_family_graph", _build)
    with tempfile.TemporaryDirectory() as tmpdir:
        code = runner.main(["crawl", "Q1339", "--out-dir", tmpdir])
        assert code == 0
        files = os.listdir(tmpdir)
        assert len(files) == 1
        with open(os.path.join(tmpdir, files[0]), "r", encoding="utf-8") as f:
            data = json.load(f)
        assert len(data["nodes"]) == 4
        assert len(data["edges"]) == 9


def test_cli_search_not_found(monkeypatch, capsys):
    async def _resolve(term, **kwargs):
        return None

    monkeypatch.setattr(runner, "resolve_identifier", _resolve)
    assert runner.main(["search", "Nobody"]) == 1
    assert "couldn't find an entry for Nobody" in capsys.readouterr().out


def test_cli_search_prints_id(capsys):
    assert runner.main(["search", "Q76"]) == 0
    assert capsys.readouterr().out.strip() == "76"
