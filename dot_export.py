"""Graphviz DOT rendering of a CFG"""

import logging
from pathlib import Path
from typing import Optional, Union

from models import BlockKind, CFG, CFGNode

logger = logging.getLogger(__name__)

NODE_SHAPES = {
    BlockKind.DECISION: "diamond",
    BlockKind.EXIT: "ellipse",
    BlockKind.ENTRY: "ellipse",
}

# Literal backslash-n, interpreted as a line break by Graphviz
LINE_BREAK = "\\n"


def node_shape(node: CFGNode) -> str:
    return NODE_SHAPES.get(node.type, "box")


def node_text(node: CFGNode) -> str:
    return node.label or LINE_BREAK.join(node.lines)


def to_dot(cfg: Optional[CFG]) -> Optional[str]:
    """
    Render the graph as a DOT document.

    Nodes are declared in block order, then edges in derivation order.
    Label text is included as-is. Returns None when there is no graph.
    """
    if cfg is None:
        return None

    dot = "digraph CFG {\n"
    dot += "  node [shape=box, style=rounded];\n"
    dot += "  rankdir=TB;\n\n"

    for node in cfg.nodes:
        dot += f'  node{node.id} [label="{node_text(node)}", shape={node_shape(node)}];\n'

    dot += "\n"

    for edge in cfg.edges:
        dot += f"  node{edge.from_node} -> node{edge.to_node}"
        if edge.label:
            dot += f' [label="{edge.label}"]'
        dot += ";\n"

    dot += "}"
    return dot


def save_dot(cfg: Optional[CFG], path: Union[str, Path]) -> bool:
    """Write the DOT document to path; does nothing without a graph"""
    dot = to_dot(cfg)
    if dot is None:
        return False
    Path(path).write_text(dot, encoding="utf-8")
    logger.info("Wrote CFG to %s", path)
    return True
