from .categories import CategoryDescriptor, CategoryType
from .dashboard import (
    CashFlowPeriod,
    CategorySummary,
    ConsolidatedData,
    DashboardFilters,
    DashboardOverview,
    DashboardSummary,
    DimensionalView,
    FinancialKPIs,
    OperationalMetrics,
    TopTransaction,
    TopTransactions,
    TypeSummary,
)
from .explore import (
    CostItem,
    CostsByCategory,
    CostsByPeriod,
    CostsData,
    CostsFilterOptions,
    ExploreFilters,
    FilterOption,
    IncomeData,
    IncomesByCenter,
    IncomesByClient,
    IncomesByPeriod,
    IncomesFilterOptions,
    PeriodAmountRow,
)
from .financial_table import FinancialCategoryRow, FinancialTableResponse
from .periods import AmountByPeriod, Period, PeriodType

__all__ = [
    "AmountByPeriod",
    "CashFlowPeriod",
    "CategoryDescriptor",
    "CategorySummary",
    "CategoryType",
    "ConsolidatedData",
    "CostItem",
    "CostsByCategory",
    "CostsByPeriod",
    "CostsData",
    "CostsFilterOptions",
    "DashboardFilters",
    "DashboardOverview",
    "DashboardSummary",
    "DimensionalView",
    "ExploreFilters",
    "FilterOption",
    "FinancialCategoryRow",
    "FinancialKPIs",
    "FinancialTableResponse",
    "IncomeData",
    "IncomesByCenter",
    "IncomesByClient",
    "IncomesByPeriod",
    "IncomesFilterOptions",
    "OperationalMetrics",
    "Period",
    "PeriodAmountRow",
    "PeriodType",
    "TopTransaction",
    "TopTransactions",
    "TypeSummary",
]
