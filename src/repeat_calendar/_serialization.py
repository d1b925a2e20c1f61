"""Key conversion between the store's camelCase JSON and snake_case fields."""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

_CAMEL_TO_SNAKE = re.compile(r"(?<=[a-z0-9])([A-Z])")
_SNAKE_TO_CAMEL = re.compile(r"_([a-z])")


def to_snake(name: str) -> str:
    """``notificationTime`` -> ``notification_time``."""
    return _CAMEL_TO_SNAKE.sub(r"_\1", name).lower()


def to_camel(name: str) -> str:
    """``notification_time`` -> ``notificationTime``."""
    return _SNAKE_TO_CAMEL.sub(lambda m: m.group(1).upper(), name)


def _convert_keys(data: Any, convert: Callable[[str], str]) -> Any:
    if isinstance(data, dict):
        return {convert(k): _convert_keys(v, convert) for k, v in data.items()}
    if isinstance(data, (list, tuple)):
        return [_convert_keys(item, convert) for item in data]
    return data


def decamelize(data: Any) -> Any:
    """Recursively convert all dict keys from camelCase to snake_case."""
    return _convert_keys(data, to_snake)


def camelize(data: Any) -> Any:
    """Recursively convert all dict keys from snake_case to camelCase."""
    return _convert_keys(data, to_camel)
