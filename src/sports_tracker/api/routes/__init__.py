"""API route modules and the shared response envelope."""

from __future__ import annotations

from typing import Any

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, mode="json")
    if isinstance(value, (list, tuple)):
        return [_dump(item) for item in value]
    if isinstance(value, dict):
        return {key: _dump(item) for key, item in value.items()}
    return jsonable_encoder(value)


def envelope(payload: Any) -> dict[str, Any]:
    """Wrap a payload as `{"data": ...}`, serializing models with camelCase keys."""
    return {"data": _dump(payload)}
