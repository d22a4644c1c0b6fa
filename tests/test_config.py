import pytest

from geneagraph.config import MAX_NODES_LIMIT, CrawlSettings, get_crawl_settings


_VARS = [
    "GENEAGRAPH_MAX_NODES",
    "GENEAGRAPH_WIKI_MOBILE",
    "WIKIDATA_API_URL",
    "GENEAGRAPH_USER_AGENT",
    "GENEAGRAPH_FETCH_TIMEOUT",
    "GENEAGRAPH_FETCH_RETRIES",
    "GENEAGRAPH_FETCH_CONCURRENCY",
    "GENEAGRAPH_CRAWL_DEADLINE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    s = get_crawl_settings()
    assert s.max_nodes == 150
    assert s.use_wiki_mobile is True
    assert s.api_url == "https://www.wikidata.org/w/api.php"
    assert s.fetch_retries == 2


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("GENEAGRAPH_MAX_NODES", "42")
    monkeypatch.setenv("GENEAGRAPH_WIKI_MOBILE", "false")
    monkeypatch.setenv("GENEAGRAPH_FETCH_TIMEOUT", "2.5")
    monkeypatch.setenv("GENEAGRAPH_CRAWL_DEADLINE", "30")
    s = get_crawl_settings()
    assert s.max_nodes == 42
    assert s.use_wiki_mobile is False
    assert s.fetch_timeout == 2.5
    assert s.crawl_deadline == 30.0


def test_max_nodes_is_clamped(monkeypatch):
    monkeypatch.setenv("GENEAGRAPH_MAX_NODES", "100000")
    assert get_crawl_settings().max_nodes == MAX_NODES_LIMIT


@pytest.mark.parametrize("name,value", [
    ("GENEAGRAPH_MAX_NODES", "lots"),
    ("GENEAGRAPH_MAX_NODES", "0"),
    ("GENEAGRAPH_FETCH_RETRIES", "-1"),
    ("GENEAGRAPH_FETCH_CONCURRENCY", "0"),
    ("GENEAGRAPH_FETCH_TIMEOUT", "soon"),
])
def test_invalid_values_raise(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(RuntimeError):
        get_crawl_settings()


def test_with_overrides():
    base = CrawlSettings()
    assert base.with_overrides() is base
    s = base.with_overrides(max_nodes=10, use_wiki_mobile=False)
    assert (s.max_nodes, s.use_wiki_mobile) == (10, False)
    assert base.max_nodes == 150
    assert base.with_overrides(max_nodes=9999).max_nodes == MAX_NODES_LIMIT
