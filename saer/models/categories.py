from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class CategoryType(str, Enum):
    MANO_OBRA = "mano_obra"
    MAQUINARIA = "maquinaria"
    MATERIALES = "materiales"
    COMBUSTIBLES = "combustibles"
    GASTOS_GENERALES = "gastos_generales"


class CategoryDescriptor(BaseModel):
    """Account category as published by the remote catalogue.

    ``type`` is kept as the raw server string so classifications added on the
    server side after this client was built still round-trip.
    """

    model_config = ConfigDict(frozen=True)
    id: Optional[int] = None
    code: Optional[str] = None
    name: str
    type: str
    group_name: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def _enum_to_value(cls, value):
        if isinstance(value, Enum):
            return value.value
        return value

    @property
    def category_type(self) -> Optional[CategoryType]:
        try:
            return CategoryType(self.type)
        except ValueError:
            return None
