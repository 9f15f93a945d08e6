"""Render bound values as YAML for display."""

from __future__ import annotations

import dataclasses
from decimal import Decimal
from enum import Enum
from io import StringIO
from typing import Any

from pydantic import BaseModel
from ruamel.yaml import YAML


def to_plain(obj: Any) -> Any:
    """Convert a bound value into plain dicts, lists and scalars."""
    if obj is None:
        return None
    elif isinstance(obj, Enum):
        return obj.name
    elif isinstance(obj, str | int | float | bool):
        return obj
    elif isinstance(obj, Decimal):
        return str(obj)
    elif isinstance(obj, list | tuple | set | frozenset):
        return [to_plain(item) for item in obj]
    elif isinstance(obj, dict):
        return {str(k): to_plain(v) for k, v in obj.items()}
    elif isinstance(obj, BaseModel):
        return {k: to_plain(getattr(obj, k)) for k in type(obj).model_fields}
    elif dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_plain(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    elif hasattr(obj, "__dict__"):
        return {
            attr_name: to_plain(attr_value)
            for attr_name, attr_value in vars(obj).items()
            if not attr_name.startswith("_")
        }
    else:
        return str(obj)


def dump_yaml(data: Any) -> str:
    """Serialize a bound value (or a map of them) to a YAML string."""
    yaml = YAML()
    yaml.indent(mapping=2, sequence=4, offset=2)
    yaml.default_flow_style = False
    yaml.allow_unicode = True
    yaml.width = 4096

    stream = StringIO()
    yaml.dump(to_plain(data), stream)
    return stream.getvalue()
