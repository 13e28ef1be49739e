"""
Client for a remote CFG generation service.

The remote service returns nodes/edges in the same shape this service
produces, except that edge endpoints may be keyed either "from"/"to" or
"from_node"/"to_node", and color/label may be missing. normalize_cfg_payload
is the only place that deals with those differences.
"""

import logging
from typing import Any, Dict, List, Optional

import requests
from pydantic import BaseModel, ValidationError

from config import Settings, get_settings
from models import CFG, CFGEdge, CFGNode, UNCONDITIONAL_COLOR

logger = logging.getLogger(__name__)

ENDPOINT_KEYS = (("from", "to"), ("from_node", "to_node"))


class PayloadError(ValueError):
    """Remote payload does not describe a valid CFG"""


class RemoteFetchResult(BaseModel):
    status: str
    message: Optional[str] = None
    cfg: Optional[CFG] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"


def _edge_endpoints(edge: Dict[str, Any]) -> tuple:
    for from_key, to_key in ENDPOINT_KEYS:
        if from_key in edge and to_key in edge:
            return edge[from_key], edge[to_key]
    raise PayloadError(f"Edge has no endpoints: {edge}")


def normalize_edge(edge: Dict[str, Any]) -> CFGEdge:
    from_id, to_id = _edge_endpoints(edge)
    return CFGEdge(
        from_node=from_id,
        to_node=to_id,
        label=edge.get("label") or "",
        color=edge.get("color") or UNCONDITIONAL_COLOR,
    )


def normalize_cfg_payload(payload: Any) -> CFG:
    """Convert a remote nodes/edges payload into a CFG"""
    if not isinstance(payload, dict):
        raise PayloadError("Payload is not a JSON object")

    raw_nodes = payload.get("nodes")
    raw_edges = payload.get("edges", [])
    if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
        raise PayloadError("Payload must contain 'nodes' and 'edges' lists")

    try:
        nodes: List[CFGNode] = [CFGNode.model_validate(node) for node in raw_nodes]
        edges = [normalize_edge(edge) for edge in raw_edges]
    except ValidationError as e:
        raise PayloadError(f"Invalid CFG payload: {e}") from e
    except (TypeError, AttributeError) as e:
        raise PayloadError(f"Invalid CFG payload: {e}") from e

    known = {node.id for node in nodes}
    for edge in edges:
        if edge.from_node not in known or edge.to_node not in known:
            raise PayloadError(
                f"Edge {edge.from_node} -> {edge.to_node} references an unknown node"
            )

    return CFG(nodes=nodes, edges=edges)


def fetch_remote_cfg(code: str, settings: Optional[Settings] = None) -> RemoteFetchResult:
    """
    Ask the remote service for a CFG.

    Failures never raise: they come back as an "error" result with a message
    the caller can show.
    """
    settings = settings or get_settings()
    if not settings.remote_service_url:
        return RemoteFetchResult(status="error", message="Remote CFG service is not configured")

    try:
        response = requests.post(
            settings.remote_service_url,
            json={"c_code": code},
            timeout=settings.remote_timeout,
        )
        response.raise_for_status()
        cfg = normalize_cfg_payload(response.json())
    except requests.exceptions.JSONDecodeError as e:
        logger.warning("Remote CFG response is not JSON: %s", e)
        return RemoteFetchResult(status="error", message=f"Remote CFG response is not JSON: {e}")
    except requests.RequestException as e:
        logger.warning("Remote CFG request failed: %s", e)
        return RemoteFetchResult(status="error", message=f"Remote CFG request failed: {e}")
    except PayloadError as e:
        logger.warning("Remote CFG payload rejected: %s", e)
        return RemoteFetchResult(status="error", message=str(e))

    return RemoteFetchResult(status="ok", cfg=cfg)
