# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
JSON serialization helpers shared by the request builder and response handler.

Output is compact UTF-8 JSON with enums written by member name. Decoding maps JSON
objects onto dataclasses with case-insensitive field matching that also ignores
``_``/``-`` separators, so ``userId``, ``UserId`` and ``user_id`` all land on the
same field. A dataclass field may pin its wire name with ``metadata={"json_name": ...}``.
"""

from __future__ import annotations

import dataclasses
import json
import types
import typing
from collections.abc import Mapping, Sequence
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from functools import lru_cache
from typing import Any, TypeVar, Union
from uuid import UUID

from .errors import DeserializationError

T = TypeVar("T")

JSON_NAME = "json_name"


def normalize_key(name: str) -> str:
    """Fold a field name for case/separator-insensitive comparison."""
    return str(name).replace("_", "").replace("-", "").lower()


def _field_wire_name(field: dataclasses.Field) -> str:
    return field.metadata.get(JSON_NAME) or field.name


def to_jsonable(value: Any) -> Any:
    """Convert a value into plain JSON-compatible Python structures."""
    if isinstance(value, Enum):
        return value.name
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {_field_wire_name(f): to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Mapping):
        return {(k.name if isinstance(k, Enum) else str(k)): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(item) for item in value]
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dumps(value: Any) -> str:
    """Serialize ``value`` to compact JSON text."""
    return json.dumps(to_jsonable(value), separators=(",", ":"), ensure_ascii=False)


def loads(text: str | bytes, target: Any = Any) -> Any:
    """Parse JSON text and decode it into ``target``."""
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DeserializationError(f"Malformed JSON body: {exc}", body=_as_text(text), target=target) from exc
    try:
        return decode(data, target)
    except DeserializationError as exc:
        exc.body = _as_text(text)
        raise


def _as_text(text: str | bytes) -> str:
    if isinstance(text, bytes):
        return text.decode("utf-8", errors="replace")
    return text


def _mismatch(data: Any, target: Any, path: str) -> DeserializationError:
    name = getattr(target, "__name__", None) or str(target)
    return DeserializationError(f"Cannot convert {type(data).__name__} at {path} to {name}", target=target)


@lru_cache(maxsize=256)
def _dataclass_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError):
        return {f.name: (Any if isinstance(f.type, str) else f.type) for f in dataclasses.fields(cls)}


def decode(data: Any, target: Any = Any, path: str = "$") -> Any:
    """Decode already-parsed JSON data into ``target``."""
    if target is Any or target is object:
        return data

    origin = typing.get_origin(target)
    args = typing.get_args(target)

    if origin is Union or origin is types.UnionType:
        return _decode_union(data, target, args, path)

    if target is type(None):
        if data is None:
            return None
        raise _mismatch(data, target, path)

    if origin is typing.Literal:
        if data in args:
            return data
        raise _mismatch(data, target, path)

    if origin in (list, Sequence) or target in (list, Sequence):
        if not isinstance(data, list):
            raise _mismatch(data, target, path)
        item_type = args[0] if args else Any
        return [decode(item, item_type, f"{path}[{i}]") for i, item in enumerate(data)]

    if origin in (set, frozenset) or target in (set, frozenset):
        if not isinstance(data, list):
            raise _mismatch(data, target, path)
        item_type = args[0] if args else Any
        container = origin or target
        return container(decode(item, item_type, f"{path}[{i}]") for i, item in enumerate(data))

    if origin is tuple or target is tuple:
        return _decode_tuple(data, target, args, path)

    if origin in (dict, Mapping) or target in (dict, Mapping):
        if not isinstance(data, dict):
            raise _mismatch(data, target, path)
        key_type, value_type = args if len(args) == 2 else (Any, Any)
        return {
            decode(key, key_type, f"{path}.<key>") if key_type not in (Any, str) else key: decode(value, value_type, f"{path}.{key}")
            for key, value in data.items()
        }

    if isinstance(target, type):
        if issubclass(target, Enum):
            return _decode_enum(data, target, path)
        if dataclasses.is_dataclass(target):
            return _decode_dataclass(data, target, path)
        return _decode_scalar(data, target, path)

    raise DeserializationError(f"Unsupported target type {target!r} at {path}", target=target)


def _decode_union(data: Any, target: Any, args: tuple[Any, ...], path: str) -> Any:
    if data is None and type(None) in args:
        return None
    for option in args:
        if option is type(None):
            continue
        try:
            return decode(data, option, path)
        except DeserializationError:
            continue
    raise _mismatch(data, target, path)


def _decode_tuple(data: Any, target: Any, args: tuple[Any, ...], path: str) -> tuple[Any, ...]:
    if not isinstance(data, list):
        raise _mismatch(data, target, path)
    if not args or (len(args) == 2 and args[1] is Ellipsis):
        item_type = args[0] if args else Any
        return tuple(decode(item, item_type, f"{path}[{i}]") for i, item in enumerate(data))
    if len(args) != len(data):
        raise DeserializationError(f"Expected {len(args)} items at {path}, got {len(data)}", target=target)
    return tuple(decode(item, item_type, f"{path}[{i}]") for i, (item, item_type) in enumerate(zip(data, args)))


def _decode_enum(data: Any, target: type[Enum], path: str) -> Enum:
    if isinstance(data, str):
        folded = data.strip().lower()
        for member in target:
            if member.name.lower() == folded:
                return member
    for member in target:
        if member.value == data and type(member.value) is type(data):
            return member
    raise _mismatch(data, target, path)


def _decode_dataclass(data: Any, target: type, path: str) -> Any:
    if data is None:
        return None
    if not isinstance(data, dict):
        raise _mismatch(data, target, path)
    by_key: dict[str, Any] = {}
    for key, value in data.items():
        by_key.setdefault(normalize_key(key), value)

    hints = _dataclass_hints(target)
    kwargs: dict[str, Any] = {}
    for field in dataclasses.fields(target):
        if not field.init:
            continue
        field_type = hints.get(field.name, Any)
        key = normalize_key(_field_wire_name(field))
        if key in by_key:
            kwargs[field.name] = decode(by_key[key], field_type, f"{path}.{field.name}")
            continue
        if field.default is not dataclasses.MISSING or field.default_factory is not dataclasses.MISSING:
            continue
        if _accepts_none(field_type):
            kwargs[field.name] = None
            continue
        raise DeserializationError(f"Missing required field '{field.name}' at {path}", target=target)
    return target(**kwargs)


def _accepts_none(field_type: Any) -> bool:
    if field_type is Any or field_type is type(None):
        return True
    origin = typing.get_origin(field_type)
    return (origin is Union or origin is types.UnionType) and type(None) in typing.get_args(field_type)


def _decode_scalar(data: Any, target: type, path: str) -> Any:
    if target is bool:
        if isinstance(data, bool):
            return data
        raise _mismatch(data, target, path)
    if target is int:
        if isinstance(data, int) and not isinstance(data, bool):
            return data
        raise _mismatch(data, target, path)
    if target is float:
        if isinstance(data, (int, float)) and not isinstance(data, bool):
            return float(data)
        raise _mismatch(data, target, path)
    if target is str:
        if isinstance(data, str):
            return data
        raise _mismatch(data, target, path)
    if target in (datetime, date) and isinstance(data, str):
        try:
            return target.fromisoformat(data)
        except ValueError as exc:
            raise _mismatch(data, target, path) from exc
    if target in (UUID, Decimal) and isinstance(data, (str, int, float)) and not isinstance(data, bool):
        try:
            return target(str(data))
        except (ValueError, ArithmeticError) as exc:
            raise _mismatch(data, target, path) from exc
    if isinstance(data, target):
        return data
    raise _mismatch(data, target, path)


__all__ = ["JSON_NAME", "decode", "dumps", "loads", "normalize_key", "to_jsonable"]
