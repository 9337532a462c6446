"""Unit tests for budget_api.services.budget_calculator."""

import pytest

from budget_api.schemas.budget import BudgetAllocation, CategoryBudgetItem
from budget_api.schemas.spending import CategorySpendingResult
from budget_api.services.budget_calculator import (
    build_category_budget_items,
    calculate_budget_summary,
    calculate_category_remaining,
    calculate_percentage_used,
    compose_budget_page_response,
)


@pytest.mark.parametrize(
    "budgeted, spent, expected",
    [(100, 30, 70), (100, 150, -50), (100, -20, 120), (0, 0, 0)],
)
def test_calculate_category_remaining(budgeted, spent, expected) -> None:
    assert calculate_category_remaining(budgeted, spent) == expected


def test_percentage_used_uses_magnitude_of_spend() -> None:
    assert calculate_percentage_used(50, 200) == pytest.approx(25.0)
    assert calculate_percentage_used(-50, 200) == pytest.approx(25.0)


def test_percentage_used_is_not_clamped() -> None:
    assert calculate_percentage_used(-300, 100) == pytest.approx(300.0)


def test_percentage_used_zero_budget() -> None:
    assert calculate_percentage_used(-75, 0) == 0
    assert calculate_percentage_used(0, 0) == 0


def _spending(category_id, total, count=1):
    return CategorySpendingResult(category_id=category_id, total_spent=total, transaction_count=count)


def test_build_items_keeps_sign_of_spend() -> None:
    budgets = [BudgetAllocation(category_id=7, category_name="Groceries", budgeted_amount=200)]
    items = build_category_budget_items(budgets, {7: _spending(7, -75.5, 3)})

    assert items[0].spent_amount == -75.5
    assert items[0].remaining_amount == pytest.approx(275.5)
    assert items[0].percentage_used == pytest.approx(37.75)


def test_build_items_defaults_missing_spend(groceries_dining_entertainment) -> None:
    items = build_category_budget_items(groceries_dining_entertainment, {})

    assert len(items) == 3
    for item, budget in zip(items, groceries_dining_entertainment):
        assert item.spent_amount == 0
        assert item.remaining_amount == budget.budgeted_amount
        assert item.percentage_used == 0


def test_build_items_preserves_input_order() -> None:
    budgets = [
        BudgetAllocation(category_id=9, category_name="Zoo", budgeted_amount=10),
        BudgetAllocation(category_id=1, category_name="Art", budgeted_amount=20),
        BudgetAllocation(category_id=5, category_name="Misc", budgeted_amount=30),
    ]
    items = build_category_budget_items(budgets, {1: _spending(1, -5)})
    assert [i.category_id for i in items] == [9, 1, 5]


def test_build_items_ignores_spend_without_budget() -> None:
    budgets = [BudgetAllocation(category_id=1, category_name="Groceries", budgeted_amount=100)]
    items = build_category_budget_items(budgets, {1: _spending(1, -10), 2: _spending(2, -999)})
    assert len(items) == 1


def test_summary_of_empty_items_is_zero() -> None:
    summary = calculate_budget_summary([])
    assert summary.total_budgeted == 0
    assert summary.total_spent == 0
    assert summary.total_remaining == 0
    assert summary.overall_percentage_used == 0


def test_summary_totals_match_item_sums() -> None:
    items = [
        CategoryBudgetItem(category_id=1, category_name="A", budgeted_amount=120, spent_amount=-40,
                           remaining_amount=160, percentage_used=33.3),
        CategoryBudgetItem(category_id=2, category_name="B", budgeted_amount=80, spent_amount=15,
                           remaining_amount=65, percentage_used=18.75),
    ]
    summary = calculate_budget_summary(items)

    assert summary.total_budgeted == sum(i.budgeted_amount for i in items)
    assert summary.total_spent == sum(i.spent_amount for i in items)
    assert summary.total_remaining == sum(i.remaining_amount for i in items)
    assert summary.overall_percentage_used == pytest.approx(25 / 200 * 100)


def test_summary_remaining_is_the_exact_item_sum() -> None:
    items = [
        CategoryBudgetItem(category_id=1, category_name="A", budgeted_amount=0.3, spent_amount=0,
                           remaining_amount=0.1, percentage_used=0),
        CategoryBudgetItem(category_id=2, category_name="B", budgeted_amount=0, spent_amount=0,
                           remaining_amount=0.2, percentage_used=0),
    ]
    summary = calculate_budget_summary(items)

    # Summed as floats, not recomputed from the budgeted and spent totals
    assert summary.total_remaining == 0.1 + 0.2
    assert summary.total_remaining != summary.total_budgeted - summary.total_spent


def test_end_to_end_budget_page(groceries_dining_entertainment) -> None:
    spending = {1: _spending(1, -250, 8), 2: _spending(2, -175, 5)}
    items = build_category_budget_items(groceries_dining_entertainment, spending)
    page = compose_budget_page_response(3, 2025, items)

    groceries, dining, entertainment = page.category_budgets
    assert groceries.remaining_amount == pytest.approx(550)
    assert groceries.percentage_used == pytest.approx(83.33, abs=0.01)
    assert dining.remaining_amount == pytest.approx(325)
    assert dining.percentage_used == pytest.approx(116.67, abs=0.01)
    assert entertainment.remaining_amount == pytest.approx(100)
    assert entertainment.percentage_used == 0

    assert page.summary.total_budgeted == pytest.approx(550)
    assert page.summary.total_spent == pytest.approx(-425)
    assert page.summary.total_remaining == pytest.approx(975)
    assert page.summary.overall_percentage_used == pytest.approx(77.27, abs=0.01)


def test_page_response_serializes_camel_case_items(groceries_dining_entertainment) -> None:
    items = build_category_budget_items(groceries_dining_entertainment, {})
    page = compose_budget_page_response(1, 2025, items)
    payload = page.model_dump(by_alias=True)

    assert payload["month"] == 1
    assert payload["year"] == 2025
    assert [i["category_name"] for i in payload["categoryBudgets"]] == ["Groceries", "Dining", "Entertainment"]
    assert payload["summary"]["total_budgeted"] == 550
