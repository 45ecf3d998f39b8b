from __future__ import annotations

from trafficbound.graph.block import Block, Direction, Message
from trafficbound.graph.protocol import GraphBuilder, GraphKind, ProtocolGraph
from trafficbound.graph.transforms import (
    blocks_to_super_block,
    fully_connect,
    rescale,
    rescale_block,
    successive_blocks,
    successive_blocks_from,
)

__all__ = [
    "Block",
    "Direction",
    "GraphBuilder",
    "GraphKind",
    "Message",
    "ProtocolGraph",
    "blocks_to_super_block",
    "fully_connect",
    "rescale",
    "rescale_block",
    "successive_blocks",
    "successive_blocks_from",
]
