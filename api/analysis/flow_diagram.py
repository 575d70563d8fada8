"""Static controller -> service -> model -> database diagram.

At most four nodes. Controller and database nodes are always present;
service and model nodes only when a matching file was found.
"""
import os
from typing import Any, Dict, List, Optional

CONTROLLER_HINTS = ("controller", "api/", "handlers/", "routes/")
SERVICE_HINTS = ("service", "lib/", "utils/")
MODEL_HINTS = ("model", "schemas", "entities")


def build_flow_diagram(files: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Build diagram nodes from analyzed Mongo files"""
    nodes = []

    controller = _first_matching(files, CONTROLLER_HINTS)
    if controller:
        nodes.append(_file_node("1", "controller", controller,
                                controller["mongoOperations"] or ["API Handlers"]))
    else:
        nodes.append({
            "id": "1",
            "type": "controller",
            "label": "API Gateway",
            "operations": ["Route Handling"],
        })

    service = _first_matching(files, SERVICE_HINTS)
    if service:
        nodes.append(_file_node("2", "service", service, service["mongoOperations"]))

    model = _first_matching(files, MODEL_HINTS)
    if model:
        nodes.append(_file_node("3", "model", model, []))

    nodes.append({
        "id": "4",
        "type": "database",
        "label": "MongoDB",
        "operations": ["CRUD"],
    })
    return nodes


def _first_matching(files, hints) -> Optional[Dict[str, Any]]:
    for entry in files:
        path = entry["path"].lower()
        if any(hint in path for hint in hints):
            return entry
    return None


def _file_node(node_id: str, node_type: str, entry: Dict[str, Any], operations) -> Dict[str, Any]:
    return {
        "id": node_id,
        "type": node_type,
        "label": os.path.splitext(entry["name"])[0],
        "file": entry["path"],
        "operations": list(operations),
    }
