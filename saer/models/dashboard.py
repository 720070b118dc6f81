from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


def to_amount(value: Any) -> float:
    if value is None:
        return 0.0
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def to_count(value: Any) -> int:
    try:
        return int(to_amount(value))
    except (OverflowError, ValueError):
        return 0


class DashboardFilters(BaseModel):
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    cost_center_id: Optional[Union[int, str]] = None

    def to_params(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)

    def cache_key(self) -> Tuple[Optional[str], Optional[str], Optional[str]]:
        cost_center = None if self.cost_center_id is None else str(self.cost_center_id)
        return (self.date_from, self.date_to, cost_center)


class DashboardSummary(BaseModel):
    model_config = ConfigDict(extra="allow")
    total_amount: float = 0.0
    total_count: int = 0
    average_amount: float = 0.0
    trend_percentage: float = 0.0

    @field_validator("total_amount", "average_amount", "trend_percentage", mode="before")
    @classmethod
    def _amounts(cls, value):
        return to_amount(value)

    @field_validator("total_count", mode="before")
    @classmethod
    def _counts(cls, value):
        return to_count(value)


class TypeSummary(BaseModel):
    model_config = ConfigDict(extra="allow")
    type_id: Optional[int] = None
    type_name: str = ""
    total_amount: float = 0.0
    count: int = 0
    percentage: float = 0.0

    @field_validator("total_amount", "percentage", mode="before")
    @classmethod
    def _amounts(cls, value):
        return to_amount(value)

    @field_validator("count", mode="before")
    @classmethod
    def _counts(cls, value):
        return to_count(value)


class CategorySummary(BaseModel):
    model_config = ConfigDict(extra="allow")
    category_id: Optional[int] = None
    category_name: str = ""
    type_name: Optional[str] = None
    total_amount: float = 0.0
    count: int = 0
    percentage: float = 0.0

    @field_validator("total_amount", "percentage", mode="before")
    @classmethod
    def _amounts(cls, value):
        return to_amount(value)

    @field_validator("count", mode="before")
    @classmethod
    def _counts(cls, value):
        return to_count(value)


class CashFlowPeriod(BaseModel):
    model_config = ConfigDict(extra="allow")
    period: str
    total_amount: float = 0.0
    count: int = 0

    @field_validator("total_amount", mode="before")
    @classmethod
    def _amounts(cls, value):
        return to_amount(value)

    @field_validator("count", mode="before")
    @classmethod
    def _counts(cls, value):
        return to_count(value)


class DimensionalView(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    summary: DashboardSummary
    by_type: List[TypeSummary] = Field(default_factory=list, alias="byType")
    by_category: List[CategorySummary] = Field(default_factory=list, alias="byCategory")
    cash_flow: List[CashFlowPeriod] = Field(default_factory=list, alias="cashFlow")


class ConsolidatedData(BaseModel):
    income: DimensionalView
    expense: DimensionalView


class FinancialKPIs(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    total_income: float = Field(default=0.0, alias="totalIncome")
    total_expense: float = Field(default=0.0, alias="totalExpense")
    net_cash_flow: float = Field(default=0.0, alias="netCashFlow")
    profit_margin: float = Field(default=0.0, alias="profitMargin")
    income_growth: float = Field(default=0.0, alias="incomeGrowth")
    expense_growth: float = Field(default=0.0, alias="expenseGrowth")
    cash_flow_growth: float = Field(default=0.0, alias="cashFlowGrowth")
    income_count: int = Field(default=0, alias="incomeCount")
    expense_count: int = Field(default=0, alias="expenseCount")


class OperationalMetrics(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    cost_centers_count: int = Field(default=0, alias="costCentersCount")
    income_types_count: int = Field(default=0, alias="incomeTypesCount")
    expense_types_count: int = Field(default=0, alias="expenseTypesCount")
    total_transactions: int = Field(default=0, alias="totalTransactions")


class TopTransaction(BaseModel):
    model_config = ConfigDict(extra="allow")
    id: int
    name: str = ""
    type_name: Optional[str] = None
    category_name: Optional[str] = None
    amount: float = 0.0
    date: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def _amounts(cls, value):
        return to_amount(value)


class TopTransactions(BaseModel):
    income: List[TopTransaction] = Field(default_factory=list)
    expense: List[TopTransaction] = Field(default_factory=list)


class DashboardOverview(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    data: ConsolidatedData
    kpis: FinancialKPIs
    metrics: OperationalMetrics
    top_transactions: TopTransactions = Field(alias="topTransactions")
