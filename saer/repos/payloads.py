from __future__ import annotations

from typing import Any, List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..errors import DomainFailure

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_model(model: Type[ModelT], payload: Any, source: str) -> ModelT:
    try:
        return model.model_validate(payload if payload is not None else {})
    except ValidationError as exc:
        raise DomainFailure(source, f"unexpected payload: {exc.error_count()} validation error(s)") from exc


def parse_list(model: Type[ModelT], payload: Any, source: str) -> List[ModelT]:
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise DomainFailure(source, f"expected a list, got {type(payload).__name__}")
    return [parse_model(model, item, source) for item in payload]


def as_list(payload: Any) -> List[Any]:
    return payload if isinstance(payload, list) else []
