from __future__ import annotations

import argparse
import asyncio
import logging
import os
from typing import Optional

from geneagraph.config import get_crawl_settings
from geneagraph.services.family_tree_service import build_family_graph
from geneagraph.services.search_service import WikidataSearch, resolve_identifier
from .errors import SeedNotFound
from .pipeline import write_graph_json


def run_family_crawl(person_id: str, *, max_nodes: Optional[int], mobile: Optional[bool], out_dir: str, pretty: bool = False) -> str:
    settings = get_crawl_settings().with_overrides(max_nodes=max_nodes, use_wiki_mobile=mobile)
    graph = asyncio.run(build_family_graph(person_id, settings=settings))
    return write_graph_json(graph.to_dict(), out_dir=out_dir, filename_prefix=f"family-{person_id}", pretty=pretty)


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Build Wikidata family graphs from the command line")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every fetched person")
    sub = parser.add_subparsers(dest="cmd", required=True)

    default_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", ".."))
    default_out = os.path.join(default_root, "data", "graphs")

    cr = sub.add_parser("crawl", help="Crawl the family around a person and write the graph JSON")
    cr.add_argument("person", help="Numeric id, Q-id or a name to search for")
    cr.add_argument("--max-nodes", type=int, default=None, help="Node cap (default from GENEAGRAPH_MAX_NODES)")
    cr.add_argument("--desktop", action="store_true", help="Link to desktop rather than mobile Wikipedia")
    cr.add_argument("--pretty", action="store_true", help="Indent the JSON output")
    cr.add_argument("--out-dir", default=default_out, help="Output directory for graph JSON files")

    se = sub.add_parser("search", help="Resolve a name or Q-id to a numeric id")
    se.add_argument("term", help="Search term")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    searcher = WikidataSearch.from_settings(get_crawl_settings())

    if args.cmd == "search":
        person_id = asyncio.run(resolve_identifier(args.term, searcher=searcher))
        if not person_id:
            print(f"Sorry, we couldn't find an entry for {args.term}")
            return 1
        print(person_id)
        return 0

    if args.cmd == "crawl":
        person_id = asyncio.run(resolve_identifier(args.person, searcher=searcher))
        if not person_id:
            print(f"Sorry, we couldn't find an entry for {args.person}")
            return 1
        try:
            path = run_family_crawl(
                person_id,
                max_nodes=args.max_nodes,
                mobile=False if args.desktop else None,
                out_dir=args.out_dir,
                pretty=args.pretty,
            )
        except SeedNotFound as exc:
            print(str(exc))
            return 1
        print(path)
        return 0

    parser.error("unknown command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
