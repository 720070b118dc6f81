from __future__ import annotations

import pytest

from saer.models.dashboard import ConsolidatedData, DashboardSummary, DimensionalView
from saer.services.kpi import calculate_kpis, calculate_kpis_from_summaries, profit_margin


def _view(total: float, count: int = 0, trend: float = 0.0) -> DimensionalView:
    return DimensionalView(summary=DashboardSummary(total_amount=total, total_count=count, trend_percentage=trend))


def test_kpis_from_consolidated_snapshot():
    data = ConsolidatedData(income=_view(1000, count=4, trend=12.5), expense=_view(600, count=9, trend=2.5))
    kpis = calculate_kpis(data)
    assert kpis.total_income == 1000
    assert kpis.total_expense == 600
    assert kpis.net_cash_flow == 400
    assert kpis.profit_margin == pytest.approx(40.0)
    assert kpis.income_growth == 12.5
    assert kpis.expense_growth == 2.5
    assert kpis.cash_flow_growth == pytest.approx(10.0)
    assert kpis.income_count == 4
    assert kpis.expense_count == 9


def test_profit_margin_is_zero_without_income():
    kpis = calculate_kpis_from_summaries(DashboardSummary(), DashboardSummary(total_amount=250))
    assert kpis.net_cash_flow == -250
    assert kpis.profit_margin == 0.0
    assert profit_margin(0, 100) == 0.0
    assert profit_margin(-10, 100) == 0.0


def test_negative_margin_when_expenses_exceed_income():
    assert profit_margin(200, -100) == pytest.approx(-50.0)


def test_summaries_coerce_loose_numbers():
    summary = DashboardSummary.model_validate(
        {"total_amount": "1500.50", "total_count": "3", "average_amount": None, "trend_percentage": None}
    )
    assert summary.total_amount == pytest.approx(1500.5)
    assert summary.total_count == 3
    assert summary.average_amount == 0.0
    assert summary.trend_percentage == 0.0


def test_kpis_serialise_with_camel_case_names():
    payload = calculate_kpis(ConsolidatedData(income=_view(10), expense=_view(5))).model_dump(by_alias=True)
    assert payload["netCashFlow"] == 5
    assert payload["profitMargin"] == pytest.approx(50.0)
    assert {"totalIncome", "totalExpense", "cashFlowGrowth", "incomeCount", "expenseCount"} <= set(payload)
