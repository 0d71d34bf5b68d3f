from datetime import datetime, timezone

import pytest

from finsight.models.enums import InsightKind, TransactionType
from finsight.services.insights import category_totals, generate_insights
from finsight.services.records import MonthlyBucket, TransactionRecord


WHEN = datetime(2026, 9, 1, tzinfo=timezone.utc)


def _months(income: float, expense: float, *, predicted: bool = False) -> list[MonthlyBucket]:
    return [
        MonthlyBucket(year=2026, month=month, income=income, expense=expense, net=income - expense, predicted=predicted)
        for month in (7, 8, 9)
    ]


def _expense(tx_id: int, amount: float, category: str | None) -> TransactionRecord:
    return TransactionRecord(
        id=tx_id,
        amount=amount,
        date=WHEN,
        type=TransactionType.expense,
        category_id=tx_id,
        category_name=category,
    )


def test_low_savings_rate_warning() -> None:
    insights = generate_insights(_months(2000.0, 1900.0), _months(2000.0, 1900.0, predicted=True), [])
    assert len(insights) == 1
    warning = insights[0]
    assert warning.kind == InsightKind.warning
    assert warning.title == "Low Savings Rate"
    assert warning.description.startswith("Your savings rate is 5.0%.")
    assert warning.financial_impact == pytest.approx(300.0)


def test_excellent_savings_rate() -> None:
    insights = generate_insights(_months(4000.0, 2000.0), [], [])
    assert [row.title for row in insights] == ["Excellent Savings Rate"]
    assert insights[0].kind == InsightKind.positive
    assert insights[0].financial_impact == pytest.approx(1200.0)


def test_moderate_savings_rate_is_quiet() -> None:
    assert generate_insights(_months(1000.0, 850.0), _months(1000.0, 850.0, predicted=True), []) == []


def test_rising_expenses_predicted() -> None:
    insights = generate_insights(_months(1500.0, 1000.0), _months(1500.0, 1200.0, predicted=True), [])
    drift = [row for row in insights if row.title == "Rising Expenses Predicted"]
    assert len(drift) == 1
    assert "20.0%" in drift[0].description
    assert drift[0].financial_impact == pytest.approx(200.0)


def test_small_expense_drift_is_ignored() -> None:
    insights = generate_insights(_months(1500.0, 1000.0), _months(1500.0, 1050.0, predicted=True), [])
    assert all(row.title != "Rising Expenses Predicted" for row in insights)


def test_category_concentration_skips_housing() -> None:
    transactions = [
        _expense(1, 1000.0, "Housing"),
        _expense(2, 600.0, "Dining"),
        _expense(3, 400.0, "Groceries"),
    ]
    insights = generate_insights(_months(1000.0, 850.0), [], transactions)
    assert [row.title for row in insights] == ["High Dining Spending"]
    dining = insights[0]
    assert dining.category == "Dining"
    assert dining.financial_impact == pytest.approx(600.0)
    assert dining.description.startswith("Dining accounts for 30.0% of your expenses.")


def test_category_totals_group_uncategorised_spend() -> None:
    totals = category_totals([_expense(1, 20.0, None), _expense(2, 30.0, None), _expense(3, 5.0, "Dining")])
    assert totals == {"Uncategorized": pytest.approx(50.0), "Dining": pytest.approx(5.0)}


def test_no_history_still_reports_low_savings() -> None:
    insights = generate_insights([], [], [])
    assert [row.title for row in insights] == ["Low Savings Rate"]
    assert insights[0].financial_impact == 0


def test_insights_are_repeatable() -> None:
    history = _months(1500.0, 1000.0)
    predictions = _months(1500.0, 1200.0, predicted=True)
    transactions = [_expense(1, 600.0, "Dining"), _expense(2, 400.0, "Groceries")]
    first = generate_insights(history, predictions, transactions)
    assert first == generate_insights(history, predictions, transactions)
    assert len(first) == 4
