"""
Uniform response envelope: {"status": ..., "data": ..., "message": ...}
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel


def _serialize(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(by_alias=True, mode="json")
    if isinstance(data, list):
        return [_serialize(item) for item in data]
    if isinstance(data, dict):
        return {key: _serialize(value) for key, value in data.items()}
    return data


def success_response(data: Any = None, message: str = "OK") -> Dict[str, Any]:
    return {"status": "success", "data": _serialize(data), "message": message}


def error_response(message: str, data: Optional[Any] = None) -> Dict[str, Any]:
    return {"status": "error", "data": data, "message": message}
