"""Turn plain schema descriptions into pydantic models for extraction."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple, Type

from pydantic import BaseModel, create_model

_TYPE_NAMES: Dict[str, Any] = {
    "string": str,
    "str": str,
    "text": str,
    "number": float,
    "float": float,
    "integer": int,
    "int": int,
    "boolean": bool,
    "bool": bool,
    "array": List[Any],
    "list": List[Any],
    "object": Dict[str, Any],
    "dict": Dict[str, Any],
    "any": Any,
}


class SchemaError(ValueError):
    """Raised when a schema description cannot be turned into a model."""


def _model_name(path: str) -> str:
    parts = [p for p in path.replace("[]", "").split(".") if p]
    return "".join(p[:1].upper() + p[1:] for p in parts)


def _resolve(descriptor: Any, path: str) -> Tuple[Any, bool]:
    """Return ``(annotation, optional)`` for a single field descriptor."""
    if isinstance(descriptor, str):
        name = descriptor.strip().lower()
        optional = name.endswith("?")
        if optional:
            name = name[:-1].strip()
        if name not in _TYPE_NAMES:
            raise SchemaError(f"Unsupported type '{descriptor}' for field '{path}'")
        return _TYPE_NAMES[name], optional
    if isinstance(descriptor, Mapping):
        return _build(descriptor, _model_name(path), prefix=f"{path}."), False
    if isinstance(descriptor, list):
        if len(descriptor) != 1:
            raise SchemaError(f"Array field '{path}' must list exactly one item type")
        item, _ = _resolve(descriptor[0], f"{path}[]")
        return List[item], False  # type: ignore[valid-type]
    raise SchemaError(f"Invalid type descriptor for field '{path}': {descriptor!r}")


def _build(description: Mapping[str, Any], model_name: str, prefix: str = "") -> Type[BaseModel]:
    if not isinstance(description, Mapping) or not description:
        raise SchemaError("Schema must be a non-empty object of field types")
    fields: Dict[str, Any] = {}
    for key, descriptor in description.items():
        if not isinstance(key, str) or not key or key.startswith("_"):
            raise SchemaError(f"Invalid field name: {key!r}")
        annotation, optional = _resolve(descriptor, f"{prefix}{key}")
        if optional:
            fields[key] = (Optional[annotation], None)
        else:
            fields[key] = (annotation, ...)
    return create_model(model_name, **fields)


def build_schema_model(
    description: Mapping[str, Any], *, model_name: str = "ExtractSchema"
) -> Type[BaseModel]:
    """Build a pydantic model from ``{field: descriptor}``.

    Descriptors are type names (``"string"``, ``"number"``, ``"integer"``,
    ``"boolean"``, ``"array"``, ``"object"``, ``"any"``), optionally suffixed
    with ``?``; a one element list for typed arrays; or a nested mapping.
    A fresh model is built on every call.
    """
    return _build(description, model_name)


__all__ = ["SchemaError", "build_schema_model"]
