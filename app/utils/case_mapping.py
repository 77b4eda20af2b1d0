"""
camelCase <-> snake_case key mapping for rows crossing the Supabase boundary
"""
import re
from typing import Any

_CAMEL_BOUNDARY = re.compile(r'(?<=[a-z0-9])([A-Z])')


def camel_to_snake_key(key: str) -> str:
    return _CAMEL_BOUNDARY.sub(r'_\1', key).lower()


def snake_to_camel_key(key: str) -> str:
    head, *rest = key.split('_')
    return head + ''.join(part[:1].upper() + part[1:] for part in rest)


def camel_to_snake(data: Any) -> Any:
    """Shallow key conversion; lists are mapped element-wise"""
    if isinstance(data, list):
        return [camel_to_snake(item) for item in data]
    if isinstance(data, dict):
        return {camel_to_snake_key(k): v for k, v in data.items()}
    return data


def snake_to_camel(data: Any) -> Any:
    if isinstance(data, list):
        return [snake_to_camel(item) for item in data]
    if isinstance(data, dict):
        return {snake_to_camel_key(k): v for k, v in data.items()}
    return data
