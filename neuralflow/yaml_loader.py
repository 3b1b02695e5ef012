from __future__ import annotations
"""Minimal YAML → Flow loader.

A declarative alternative to wiring nodes in Python.  Example YAML:

```yaml
name: Branching Demo
start: set_number
max_steps: 100          # optional iteration guard
params:
  multiplier: 3
nodes:                  # optional: build nodes from classes
  set_number: {use: "my_nodes:SetNumberNode", args: {number: 10}}
edges:
  - {from: set_number, to: add_number}
  - {from: set_number, to: capture_big, action: over_20}
  - {from: add_number, to: capture_small, action: added}
```

Names are looked up in ``nodes`` first, then in *symbols*, then imported
when they contain a module path like ``"pkg.mod:obj"``.  A symbol may be a
node instance or a node class (instantiated once with ``args``).

Usage:
    from neuralflow.yaml_loader import load_flow
    flow = load_flow("my.yml", symbols=globals())
"""
from importlib import import_module
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml
from jsonschema import validate as _js_validate

from neuralflow.core.errors import InvalidGraph
from neuralflow.core.flow import Flow
from neuralflow.core.node import BaseNode

__all__ = ["load_flow", "build_flow"]


# --------------------------------------------------------------------------- #

def _resolve(name: str, symbols: Mapping[str, Any]) -> Any:  # noqa: D401
    """Return python object for *name* (look in *symbols* then import)."""
    if name in symbols:
        return symbols[name]
    if ":" in name:  # module:path style
        mod_name, attr = name.split(":", 1)
        try:
            mod = import_module(mod_name)
            return getattr(mod, attr)
        except (ImportError, AttributeError) as e:
            raise InvalidGraph(f"cannot import '{name}': {e}") from e
    raise InvalidGraph(f"Symbol '{name}' not found in symbols nor importable")


def _instantiate(alias: str, obj: Any, args: Dict[str, Any]) -> BaseNode:
    if isinstance(obj, type) and issubclass(obj, BaseNode):
        node = obj(**args)
        if node.name == type(node).__name__:
            node.name = alias
        return node
    if isinstance(obj, BaseNode):
        if args:
            raise InvalidGraph(f"'{alias}' is already a node instance; 'args' not allowed")
        return obj
    raise InvalidGraph(f"'{alias}' resolves to {type(obj).__name__}, not a node")


class _Builder:  # noqa: D101
    def __init__(self, spec: Dict[str, Any], symbols: Mapping[str, Any]):
        self.decls: Dict[str, Any] = spec.get("nodes") or {}
        self.symbols = symbols
        self.built: Dict[str, BaseNode] = {}

    def node(self, alias: str) -> BaseNode:
        if alias not in self.built:
            decl = self.decls.get(alias)
            if decl is None:
                obj, args = _resolve(alias, self.symbols), {}
            elif isinstance(decl, str):
                obj, args = _resolve(decl, self.symbols), {}
            else:
                obj, args = _resolve(decl["use"], self.symbols), dict(decl.get("args") or {})
            self.built[alias] = _instantiate(alias, obj, args)
        return self.built[alias]


def build_flow(spec: Dict[str, Any], symbols: Mapping[str, Any]) -> Flow:  # noqa: D401
    """Build a Flow from an already-parsed YAML document."""
    _js_validate(instance=spec, schema=_SCHEMA)
    builder = _Builder(spec, symbols)
    flow = Flow(
        builder.node(spec["start"]),
        max_steps=spec.get("max_steps"),
        name=spec.get("name", "YAML Flow"),
    )
    flow.set_params(spec.get("params") or {})
    for edge in spec.get("edges") or []:
        builder.node(edge["from"]).next(builder.node(edge["to"]), edge.get("action"))
    return flow


def load_flow(path: str | Path, symbols: Mapping[str, Any] | None = None) -> Flow:  # noqa: D401
    """Load YAML file at *path* into a Flow."""
    data = yaml.safe_load(Path(path).read_text())
    return build_flow(data, symbols or {})


# --------------------------------------------------------------------------- #
# Minimal JSON Schema for YAML files
# --------------------------------------------------------------------------- #

_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["start"],
    "additionalProperties": False,
    "properties": {
        "name": {"type": "string"},
        "start": {"type": "string"},
        "max_steps": {"type": "integer", "minimum": 1},
        "params": {"type": "object"},
        "nodes": {
            "type": "object",
            "additionalProperties": {
                "anyOf": [
                    {"type": "string"},
                    {
                        "type": "object",
                        "required": ["use"],
                        "additionalProperties": False,
                        "properties": {
                            "use": {"type": "string"},
                            "args": {"type": "object"},
                        },
                    },
                ]
            },
        },
        "edges": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["from", "to"],
                "additionalProperties": False,
                "properties": {
                    "from": {"type": "string"},
                    "to": {"type": "string"},
                    "action": {"type": ["string", "null"]},
                },
            },
        },
    },
}
