import logging
from typing import List, Optional

from block_extractor import extract_blocks
from config import Settings
from models import (
    BlockKind,
    CFG,
    CFGEdge,
    CFGNode,
    FALSE_LABEL,
    TRUE_LABEL,
    edge_color,
)

logger = logging.getLogger(__name__)


def make_edge(from_id: int, to_id: int, label: str = "") -> CFGEdge:
    return CFGEdge(from_node=from_id, to_node=to_id, label=label, color=edge_color(label))


def find_false_target(blocks: List[CFGNode], start: int) -> Optional[int]:
    """Index of the first decision or exit block at or after start"""
    index = start
    while index < len(blocks) and blocks[index].type not in (BlockKind.DECISION, BlockKind.EXIT):
        index += 1
    return index if index < len(blocks) else None


def synthesize_edges(blocks: List[CFGNode]) -> List[CFGEdge]:
    edges = []

    for i in range(len(blocks) - 1):
        current = blocks[i]
        next_block = blocks[i + 1]
        if current.type == BlockKind.DECISION:
            edges.append(make_edge(current.id, next_block.id, TRUE_LABEL))
            false_index = find_false_target(blocks, i + 2)
            if false_index is not None:
                edges.append(make_edge(current.id, blocks[false_index].id, FALSE_LABEL))
            else:
                logger.debug("Decision %d (%s) has no False target", current.id, current.label)
        elif current.type != BlockKind.EXIT:
            edges.append(make_edge(current.id, next_block.id))

    return edges


def generate_cfg_from_blocks(blocks: List[CFGNode]) -> CFG:
    return CFG(nodes=list(blocks), edges=synthesize_edges(blocks))


def generate_cfg(code: str, settings: Optional[Settings] = None) -> CFG:
    """Build the control-flow graph of a C snippet"""
    cfg = generate_cfg_from_blocks(extract_blocks(code, settings))
    logger.info("Generated CFG with %d nodes and %d edges", len(cfg.nodes), len(cfg.edges))
    return cfg
