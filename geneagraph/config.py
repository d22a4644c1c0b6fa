import os
from dataclasses import dataclass, replace
from typing import Optional


DEFAULT_WIKIDATA_API_URL = "https://www.wikidata.org/w/api.php"
DEFAULT_USER_AGENT = "geneagraph/0.1 (family tree explorer; httpx)"

# Upper bound accepted from request parameters; the env default may not exceed it either.
MAX_NODES_LIMIT = 500


@dataclass(frozen=True)
class CrawlSettings:
    max_nodes: int = 150
    use_wiki_mobile: bool = True
    api_url: str = DEFAULT_WIKIDATA_API_URL
    user_agent: str = DEFAULT_USER_AGENT
    fetch_timeout: float = 10.0
    fetch_retries: int = 2
    fetch_concurrency: int = 16
    crawl_deadline: float = 60.0

    def with_overrides(self, *, max_nodes: Optional[int] = None, use_wiki_mobile: Optional[bool] = None) -> "CrawlSettings":
        """Return a copy with per-request overrides applied (None keeps the current value)."""
        changes = {}
        if max_nodes is not None:
            changes["max_nodes"] = max(1, min(int(max_nodes), MAX_NODES_LIMIT))
        if use_wiki_mobile is not None:
            changes["use_wiki_mobile"] = bool(use_wiki_mobile)
        return replace(self, **changes) if changes else self


def _load_env_from_file():
    """Load environment variables from a .env file at the project root if present.

    Only sets variables that aren't already present in the process environment.
    """
    try:
        root_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
        env_path = os.path.join(root_dir, ".env")
        if not os.path.isfile(env_path):
            return
        with open(env_path, "r", encoding="utf-8") as f:
            for line in f:
                s = line.strip()
                if not s or s.startswith("#"):
                    continue
                if "=" not in s:
                    continue
                key, val = s.split("=", 1)
                key = key.strip()
                val = val.strip().strip('"').strip("'")
                if key and (key not in os.environ or not os.environ[key]):
                    os.environ[key] = val
    except OSError:
        # .env loading is best-effort
        pass


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"Environment variable {name} must be an integer, got {raw!r}")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"Environment variable {name} must be a number, got {raw!r}")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def get_crawl_settings() -> CrawlSettings:
    """Build crawl settings from the environment (and .env), applying defaults.

    Environment:
    - GENEAGRAPH_MAX_NODES (default 150, capped at 500)
    - GENEAGRAPH_WIKI_MOBILE (default true)
    - WIKIDATA_API_URL
    - GENEAGRAPH_USER_AGENT
    - GENEAGRAPH_FETCH_TIMEOUT (seconds per request)
    - GENEAGRAPH_FETCH_RETRIES (extra attempts after a transient failure)
    - GENEAGRAPH_FETCH_CONCURRENCY (max in-flight requests per round)
    - GENEAGRAPH_CRAWL_DEADLINE (seconds for a whole crawl)
    """
    _load_env_from_file()

    max_nodes = _env_int("GENEAGRAPH_MAX_NODES", 150)
    retries = _env_int("GENEAGRAPH_FETCH_RETRIES", 2)
    concurrency = _env_int("GENEAGRAPH_FETCH_CONCURRENCY", 16)
    if max_nodes < 1:
        raise RuntimeError("GENEAGRAPH_MAX_NODES must be at least 1")
    if retries < 0:
        raise RuntimeError("GENEAGRAPH_FETCH_RETRIES must not be negative")
    if concurrency < 1:
        raise RuntimeError("GENEAGRAPH_FETCH_CONCURRENCY must be at least 1")

    return CrawlSettings(
        max_nodes=min(max_nodes, MAX_NODES_LIMIT),
        use_wiki_mobile=_env_bool("GENEAGRAPH_WIKI_MOBILE", True),
        api_url=os.getenv("WIKIDATA_API_URL") or DEFAULT_WIKIDATA_API_URL,
        user_agent=os.getenv("GENEAGRAPH_USER_AGENT") or DEFAULT_USER_AGENT,
        fetch_timeout=_env_float("GENEAGRAPH_FETCH_TIMEOUT", 10.0),
        fetch_retries=retries,
        fetch_concurrency=concurrency,
        crawl_deadline=_env_float("GENEAGRAPH_CRAWL_DEADLINE", 60.0),
    )
