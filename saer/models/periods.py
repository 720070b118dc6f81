from __future__ import annotations

from datetime import date
from typing import Dict, Literal

from pydantic import BaseModel, ConfigDict, Field

PeriodType = Literal["weekly", "monthly", "quarterly", "annual"]

AmountByPeriod = Dict[str, float]


class Period(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)
    id: str
    label: str
    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")
