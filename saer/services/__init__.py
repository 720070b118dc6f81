"""Service layer namespace."""

__all__ = [
    "cache",
    "categories",
    "consolidated_dashboard",
    "costs",
    "financial_aggregation",
    "incomes",
    "kpi",
    "periods",
]
