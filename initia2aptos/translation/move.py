"""
Move module and resource rendering: Initia JSON strings -> Aptos shapes.
"""

from __future__ import annotations

import json

from initia2aptos.initia_client.models import MoveModule, MoveResource
from initia2aptos.translation.models import MoveModuleBytecode, MoveResourceResponse


def to_module_bytecode(module: MoveModule) -> MoveModuleBytecode:
    """{abi: parsed ABI JSON, bytecode: raw bytes string as returned upstream}."""
    return MoveModuleBytecode(abi=json.loads(module.abi), bytecode=module.raw_bytes)


def to_resource_response(resource: MoveResource) -> MoveResourceResponse:
    """{type: struct tag, data: parsed resource value}."""
    value = json.loads(resource.move_resource)
    # Initia wraps the value as {"type": <struct tag>, "data": ...}
    if isinstance(value, dict) and set(value) == {"type", "data"} and value["type"] == resource.struct_tag:
        value = value["data"]
    return MoveResourceResponse(type=resource.struct_tag, data=value)
