# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""JSON encoding and typed decoding for request and response bodies.

Encoding goes through ``pydantic_core.to_json`` so models, dataclasses,
datetimes and UUIDs serialize without custom hooks. Decoding parses the
text with :mod:`json`, optionally folds object keys onto the target type's
field names ignoring case, then validates with a cached pydantic
``TypeAdapter``.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import functools
import json
import types
from typing import Annotated, Any, TypeVar, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel, RootModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json
from typing_extensions import is_typeddict

from httpmessenger.kernel.exceptions import DeserializationException, SerializationException

T = TypeVar("T")

_SEQUENCE_ORIGINS = (
    list,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.Iterable,
)
_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


@functools.lru_cache(maxsize=256)
def _adapter(target_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target_type)


def _adapter_for(target_type: Any) -> TypeAdapter[Any]:
    try:
        hash(target_type)
    except TypeError:
        return TypeAdapter(target_type)
    return _adapter(target_type)


def _type_name(target_type: Any) -> str:
    return getattr(target_type, "__name__", None) or repr(target_type)


def _field_lookup(target_type: Any) -> dict[str, tuple[str, Any]]:
    """Map lower-cased JSON keys to ``(canonical key, annotation)`` for object types."""
    if not isinstance(target_type, type) or get_origin(target_type) is not None:
        return {}

    lookup: dict[str, tuple[str, Any]] = {}
    if issubclass(target_type, BaseModel):
        for name, info in target_type.model_fields.items():
            key = info.alias or name
            lookup[name.lower()] = (key, info.annotation)
            lookup[key.lower()] = (key, info.annotation)
    elif dataclasses.is_dataclass(target_type):
        hints = get_type_hints(target_type, include_extras=True)
        for field in dataclasses.fields(target_type):
            lookup[field.name.lower()] = (field.name, hints.get(field.name, Any))
    elif is_typeddict(target_type):
        for name, annotation in get_type_hints(target_type, include_extras=True).items():
            lookup[name.lower()] = (name, annotation)
    return lookup


def fold_keys(value: Any, target_type: Any) -> Any:
    """Rewrite object keys in *value* to match *target_type*'s field names, ignoring case.

    Keys with no matching field are kept as-is. Values are recursed into along
    the type's ``list``/``tuple``/``set``/``dict``/``Optional``/``Union``
    arguments and into the ``root`` annotation of ``RootModel`` subclasses.
    """
    origin = get_origin(target_type)
    args = get_args(target_type)

    if origin is Annotated:
        return fold_keys(value, args[0])

    if isinstance(target_type, type) and origin is None and issubclass(target_type, RootModel):
        return fold_keys(value, target_type.model_fields["root"].annotation)

    if origin is Union or origin is types.UnionType:
        for arg in args:
            if arg is type(None):
                continue
            if isinstance(value, dict) and (_field_lookup(arg) or get_origin(arg) in _MAPPING_ORIGINS):
                return fold_keys(value, arg)
            if isinstance(value, list) and get_origin(arg) in (*_SEQUENCE_ORIGINS, tuple):
                return fold_keys(value, arg)
        return value

    if isinstance(value, list):
        if origin is tuple and args and not (len(args) == 2 and args[1] is Ellipsis):
            return [fold_keys(item, arg) for item, arg in zip(value, args)] + value[len(args):]
        if origin is tuple or origin in _SEQUENCE_ORIGINS:
            item_type = args[0] if args else Any
            return [fold_keys(item, item_type) for item in value]
        return value

    if isinstance(value, dict):
        if origin in _MAPPING_ORIGINS:
            value_type = args[1] if len(args) == 2 else Any
            return {key: fold_keys(item, value_type) for key, item in value.items()}

        lookup = _field_lookup(target_type)
        if not lookup:
            return value

        folded: dict[str, Any] = {}
        for key, item in value.items():
            match = lookup.get(key.lower()) if isinstance(key, str) else None
            if match is None:
                folded[key] = item
                continue
            canonical, annotation = match
            folded[canonical] = fold_keys(item, annotation)
        return folded

    return value


class JsonSerializer:
    """Encodes request bodies to JSON and decodes response bodies into typed values.

    Args:
        case_insensitive: Match JSON object keys to field names ignoring case.
    """

    def __init__(self, case_insensitive: bool = True) -> None:
        self._case_insensitive = case_insensitive

    @property
    def case_insensitive(self) -> bool:
        return self._case_insensitive

    def serialize(self, data: Any) -> str:
        """Encode *data* as a compact UTF-8 JSON string."""
        try:
            return to_json(data).decode("utf-8")
        except PydanticSerializationError as exc:
            raise SerializationException(
                f"Cannot serialize {type(data).__name__} to JSON: {exc}",
                code="SERIALIZATION_ERROR",
                context={"source_type": type(data).__name__},
            ) from exc

    def deserialize(self, text: str, target_type: type[T] | Any) -> T:
        """Parse *text* as JSON and validate it into *target_type*.

        Raises:
            DeserializationException: The text is not JSON, or its shape does
                not match *target_type*.
        """
        context = {"target_type": _type_name(target_type)}
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DeserializationException(
                f"Response body is not valid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})",
                code="DESERIALIZATION_ERROR",
                context=context,
            ) from exc

        if self._case_insensitive:
            raw = fold_keys(raw, target_type)

        try:
            return _adapter_for(target_type).validate_python(raw)
        except ValidationError as exc:
            raise DeserializationException(
                f"Response body does not match {context['target_type']}: {exc.error_count()} validation error(s)",
                code="DESERIALIZATION_ERROR",
                context={**context, "errors": exc.errors(include_url=False)},
            ) from exc
