from __future__ import annotations

from ..models.dashboard import ConsolidatedData, DashboardSummary, FinancialKPIs


def profit_margin(total_income: float, net_cash_flow: float) -> float:
    # No income means no margin, never a division error.
    if total_income > 0:
        return net_cash_flow / total_income * 100
    return 0.0


def calculate_kpis_from_summaries(income: DashboardSummary, expense: DashboardSummary) -> FinancialKPIs:
    total_income = income.total_amount or 0.0
    total_expense = expense.total_amount or 0.0
    net_cash_flow = total_income - total_expense

    income_growth = income.trend_percentage or 0.0
    expense_growth = expense.trend_percentage or 0.0

    return FinancialKPIs(
        total_income=total_income,
        total_expense=total_expense,
        net_cash_flow=net_cash_flow,
        profit_margin=profit_margin(total_income, net_cash_flow),
        income_growth=income_growth,
        expense_growth=expense_growth,
        cash_flow_growth=income_growth - expense_growth,
        income_count=income.total_count or 0,
        expense_count=expense.total_count or 0,
    )


def calculate_kpis(data: ConsolidatedData) -> FinancialKPIs:
    return calculate_kpis_from_summaries(data.income.summary, data.expense.summary)
