# jenkinsweave/tree_json.py
# JSON export/import of the parsed tree, checked against
# schemas/jenkinsfile-tree.schema.json.

from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema
from jsonschema.exceptions import best_match

from .errors import TreeSchemaError
from .model import BLOCK, Element, Pipeline

SCHEMA_PATH = Path(__file__).resolve().parent / "schemas" / "jenkinsfile-tree.schema.json"

_SCHEMA: Optional[Dict[str, Any]] = None


def load_schema() -> Dict[str, Any]:
    global _SCHEMA
    if _SCHEMA is None:
        _SCHEMA = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
    return _SCHEMA


def _element_to_dict(el: Element) -> Dict[str, Any]:
    if el.kind == BLOCK:
        return {
            "kind": el.kind,
            "name": el.name,
            "role": el.role,
            "hasBraces": True,
            "children": [_element_to_dict(c) for c in el.children],
        }
    return {"kind": el.kind, "name": el.name, "content": el.content}


def to_dict(pipeline: Pipeline) -> Dict[str, Any]:
    return {"type": "Pipeline", "elements": [_element_to_dict(e) for e in pipeline.elements]}


def validate_tree(obj: Any) -> None:
    """Raise TreeSchemaError if `obj` is not a valid tree export."""
    validator = jsonschema.Draft202012Validator(load_schema())
    err = best_match(validator.iter_errors(obj))
    if err is not None:
        path = "/".join(str(p) for p in err.absolute_path)
        raise TreeSchemaError(err.message, path)


def _element_from_dict(d: Dict[str, Any]) -> Element:
    if d["kind"] == BLOCK:
        return Element.block(d["name"], [_element_from_dict(c) for c in d["children"]])
    # sh lines and statements keep their recorded content
    return Element(d["kind"], d["name"], d["content"])


def pipeline_from_dict(obj: Dict[str, Any]) -> Pipeline:
    validate_tree(obj)
    return Pipeline([_element_from_dict(e) for e in obj["elements"]])
