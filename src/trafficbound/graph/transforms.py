from __future__ import annotations

import logging
import math
from fractions import Fraction
from typing import Sequence

from trafficbound.graph.block import Block
from trafficbound.graph.protocol import GraphKind, ProtocolGraph

logger = logging.getLogger(__name__)

Path = tuple[Block, ...]


def successive_blocks_from(block: Block, n: int) -> list[Path]:
    if n <= 1 or not block.next_blocks:
        return [(block,)]
    paths: dict[Path, None] = {}
    for successor in block.next_blocks:
        for tail in successive_blocks_from(successor, n - 1):
            paths[(block, *tail)] = None
    return list(paths)


def successive_blocks(graph: ProtocolGraph, n: int) -> list[Path]:
    paths: dict[Path, None] = {}
    for block in graph:
        for path in successive_blocks_from(block, n):
            paths[path] = None
    return list(paths)


def blocks_to_super_block(blocks: Sequence[Block]) -> Block:
    label = "--".join(b.label for b in blocks)
    super_block = Block(label, sum(b.period for b in blocks))
    offset = 0
    for block in blocks:
        for message in block:
            super_block.add_message(message.label, offset + message.offset, message.size)
        offset += block.period
    return super_block


def _interconnect(blocks: Sequence[Block]) -> None:
    for a in blocks:
        for b in blocks:
            a.add_next(b)


def fully_connect(graph: ProtocolGraph, num_successive_blocks: int) -> ProtocolGraph:
    """Merge every path of ``num_successive_blocks`` blocks and let any merged block follow any other.

    Paths shorter than requested are kept where a block has no successor.
    """
    if num_successive_blocks < 1:
        raise ValueError(f"Need at least one block per super block, got {num_successive_blocks}")
    super_blocks = [blocks_to_super_block(path) for path in successive_blocks(graph, num_successive_blocks)]
    _interconnect(super_blocks)
    logger.debug(
        "Fully connected model with %s super blocks of %s successive blocks",
        len(super_blocks),
        num_successive_blocks,
    )
    return ProtocolGraph(super_blocks, kind=GraphKind.FULLY_CONNECTED)


def rescale_block(block: Block, length: int) -> Block:
    result = Block(block.label, length)
    for message in block:
        scaled = Fraction(message.offset * length, block.period)
        offset = min(math.floor(scaled + Fraction(1, 2)), length - 1)
        result.add_message(message.label, offset, message.size)
    return result


def rescale(graph: ProtocolGraph) -> ProtocolGraph:
    """Squeeze every block onto the shortest period and fully interconnect the result."""
    length = graph.shortest_block_length()
    rescaled = [rescale_block(block, length) for block in graph]
    _interconnect(rescaled)
    logger.debug("Rescaled %s blocks onto a common period of %s", len(rescaled), length)
    return ProtocolGraph(rescaled, kind=GraphKind.RESCALED)
