from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BlockKind(str, Enum):
    ENTRY = "entry"
    STATEMENT = "statement"
    DECISION = "decision"
    EXIT = "exit"


ENTRY_LABEL = "START"
EXIT_LABEL = "EXIT"

TRUE_LABEL = "True"
FALSE_LABEL = "False"

TRUE_COLOR = "#22c55e"
FALSE_COLOR = "#ef4444"
UNCONDITIONAL_COLOR = "#6b7280"

EDGE_COLORS = {
    TRUE_LABEL: TRUE_COLOR,
    FALSE_LABEL: FALSE_COLOR,
}


def edge_color(label: str) -> str:
    return EDGE_COLORS.get(label, UNCONDITIONAL_COLOR)


class CFGNode(BaseModel):
    """Basic block"""
    model_config = ConfigDict(frozen=True)

    id: int
    lines: List[str] = Field(default_factory=list)
    type: BlockKind
    label: Optional[str] = None


class CFGEdge(BaseModel):
    """Control-flow edge, serialized with "from"/"to" keys"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_node: int = Field(alias="from")
    to_node: int = Field(alias="to")
    label: str = ""
    color: str = UNCONDITIONAL_COLOR


class CFG(BaseModel):
    """Ordered blocks plus the edges derived from them"""
    model_config = ConfigDict(frozen=True)

    nodes: List[CFGNode]
    edges: List[CFGEdge]

    def node_ids(self) -> List[int]:
        return [node.id for node in self.nodes]
