from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Any, Dict

from .base import canonical_json


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def write_graph_json(graph: Dict[str, Any], out_dir: str, filename_prefix: str, *, pretty: bool = False) -> str:
    """Write a serialized graph ({nodes, edges}) to a timestamped JSON file.

    Returns the path to the written file.
    """
    ensure_dir(out_dir)
    dt = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    path = os.path.join(out_dir, f"{filename_prefix}-{dt}.json")
    with open(path, "w", encoding="utf-8") as f:
        if pretty:
            f.write(json.dumps(graph, ensure_ascii=False, indent=2))
        else:
            f.write(canonical_json(graph))
        f.write("\n")
    return path
