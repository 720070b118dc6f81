from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from .periods import Period


class FinancialCategoryRow(BaseModel):
    category: str
    amounts: Dict[str, float]
    path: str


class FinancialTableResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    periods: List[Period]
    category_keys: List[str] = Field(alias="categoryKeys")
    fixed: Dict[str, Dict[str, float]]
    categories: List[FinancialCategoryRow] = Field(default_factory=list)
    totals_by_period: Dict[str, float] = Field(alias="totalsByPeriod")
    grand_total: float = Field(alias="grandTotal")
    degraded_sources: List[str] = Field(default_factory=list, alias="degradedSources")
