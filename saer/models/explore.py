from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .dashboard import to_amount
from .periods import PeriodType


class ExploreFilters(BaseModel):
    """Query filters shared by the costs and incomes explore views."""

    period_type: Optional[PeriodType] = None
    year: Optional[str] = None
    cost_center_id: Optional[str] = None
    category_id: Optional[str] = None
    client_id: Optional[str] = None
    status: Optional[str] = None

    def to_params(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class CostItem(BaseModel):
    model_config = ConfigDict(extra="allow")
    cost_id: Optional[int] = None
    transaction_type: Optional[str] = None
    description: Optional[str] = None
    amount: float = 0.0
    date: Optional[str] = None
    period_year: Optional[int] = None
    period_month: Optional[int] = None
    status: Optional[str] = None
    cost_center_name: Optional[str] = None
    category_name: Optional[str] = None
    supplier_name: Optional[str] = None
    source_type: Optional[str] = None
    period_key: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def _amounts(cls, value):
        return to_amount(value)


class CostsByCategory(BaseModel):
    category_id: int
    title: str
    amount: float
    count: int
    path: str
    has_data: bool


class CostsData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    total_expenses: float = Field(default=0.0, alias="totalExpenses")
    pending_expenses: int = Field(default=0, alias="pendingExpenses")
    recent_expenses: List[CostItem] = Field(default_factory=list, alias="recentExpenses")
    by_category_data: List[CostsByCategory] = Field(default_factory=list, alias="byCategoryData")


class PeriodAmountRow(BaseModel):
    """Raw ``{name, period_key, total_amount}`` row of a by-period endpoint."""

    model_config = ConfigDict(extra="allow")
    category_name: Optional[str] = None
    client_name: Optional[str] = None
    client_tax_id: Optional[str] = None
    period_key: str
    total_amount: float = 0.0

    @field_validator("total_amount", mode="before")
    @classmethod
    def _amounts(cls, value):
        return to_amount(value)


class CostsByPeriod(BaseModel):
    category: str
    path: str
    amounts: Dict[str, float]


class IncomesByPeriod(BaseModel):
    client: str
    path: str
    amounts: Dict[str, float]


class IncomesByClient(BaseModel):
    client_id: str
    client_name: str
    client_tax_id: str
    amount: float
    count: int
    path: str
    has_data: bool


class IncomesByCenter(BaseModel):
    center_id: int
    center_name: str
    center_code: str
    amount: float
    count: int
    path: str
    has_data: bool


class IncomeData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    total_incomes: float = Field(default=0.0, alias="totalIncomes")
    pending_incomes: int = Field(default=0, alias="pendingIncomes")
    recent_incomes: List[Dict[str, Any]] = Field(default_factory=list, alias="recentIncomes")
    by_client_data: List[IncomesByClient] = Field(default_factory=list, alias="byClientData")
    by_center_data: List[IncomesByCenter] = Field(default_factory=list, alias="byCenterData")


class FilterOption(BaseModel):
    value: str
    label: str


class CostsFilterOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    projects: List[FilterOption] = Field(default_factory=list)
    cost_centers: List[FilterOption] = Field(default_factory=list, alias="costCenters")
    categories: List[FilterOption] = Field(default_factory=list)
    statuses: List[FilterOption] = Field(default_factory=list)


class IncomesFilterOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    projects: List[FilterOption] = Field(default_factory=list)
    cost_centers: List[FilterOption] = Field(default_factory=list, alias="costCenters")
    clients: List[FilterOption] = Field(default_factory=list)
    statuses: List[FilterOption] = Field(default_factory=list)

