"""Strict structural validation applied to every transformed record."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from moneymap.core.errors import SchemaValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_record(domain: str, model: type[ModelT], data: Any) -> ModelT:
    """Validate ``data`` against ``model``; violations become ``SchemaValidationError``."""

    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise SchemaValidationError(domain, exc.errors(include_url=False, include_input=False)) from exc


__all__ = ["validate_record"]
