"""
Tolerant readers for model-generated tool arguments.

The model may omit keys or send the wrong JSON type. A value of the wrong
type is treated as missing so the tool falls back to its default.
"""

from typing import Any


def get_str(params: dict, key: str, default: str = "") -> str:
    value = params.get(key) if isinstance(params, dict) else None
    if not isinstance(value, str):
        return default
    return value


def get_bool(params: dict, key: str, default: bool = False) -> bool:
    value = params.get(key) if isinstance(params, dict) else None
    if isinstance(value, bool):
        return value
    # Some models quote booleans
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    return default


def get_list(params: dict, key: str) -> list[Any]:
    value = params.get(key) if isinstance(params, dict) else None
    if not isinstance(value, list):
        return []
    return value
