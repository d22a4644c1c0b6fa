"""Graph output package.

The crawl subsystem produces a CrawlContext; this package turns it into the
node/edge graph served to the visualization.
"""
from .serializer import (
    Graph,
    VisualNode,
    node_colour_for_person,
    serialize_graph,
)

__all__ = [
    'Graph', 'VisualNode', 'node_colour_for_person', 'serialize_graph',
]
