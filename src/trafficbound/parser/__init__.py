from __future__ import annotations

from trafficbound.parser.dot import parse_protocol_graph, read_protocol_graph

__all__ = ["parse_protocol_graph", "read_protocol_graph"]
