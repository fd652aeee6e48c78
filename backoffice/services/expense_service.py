# ==============================================================================
# EXPENSE SERVICE - Expense Book and Totals
# ==============================================================================

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from backoffice.core.constants import DatabaseConstants, ExpenseType
from backoffice.database.adapters.base_adapter import BaseDatabaseAdapter
from backoffice.schemas.expense import (
    ExpenseCreate,
    ExpenseResponse,
    ExpenseSummary,
    ExpenseUpdate,
)
from backoffice.services.base_service import BaseService

SORTABLE_FIELDS = ("date", "amount", "spend_by", "created_at")
UNKNOWN_SPENDER = "Unknown"


def _add(totals: Dict[str, Decimal], key: str, amount: Decimal) -> None:
    totals[key] = totals.get(key, Decimal("0")) + amount


def summarize_expenses(expenses: Iterable[ExpenseResponse]) -> ExpenseSummary:
    """
    Reduce expense entries to totals.

    `credit` entries are money received and are kept out of total_spend.
    spend_by_user only counts entries typed exactly `spend`, while
    total_by_user counts every type.
    """
    summary = ExpenseSummary()

    for expense in expenses:
        spender = expense.spend_by or UNKNOWN_SPENDER
        kind = (expense.type or "").lower()

        summary.count += 1
        if kind == ExpenseType.CREDIT:
            summary.total_credit += expense.amount
        else:
            summary.total_spend += expense.amount

        if kind == ExpenseType.SPEND:
            _add(summary.spend_by_user, spender, expense.amount)
        _add(summary.total_by_user, spender, expense.amount)
        _add(summary.total_by_type, kind, expense.amount)

    return summary


class ExpenseService(BaseService[ExpenseCreate, ExpenseUpdate, ExpenseResponse]):
    """Expense book CRUD and summary."""

    _resource_name = "Expense"

    def __init__(self, adapter: BaseDatabaseAdapter) -> None:
        super().__init__(adapter, DatabaseConstants.EXPENSES_COLLECTION)

    def _to_response(self, entity: Any) -> ExpenseResponse:
        if isinstance(entity, dict):
            return ExpenseResponse.model_validate(entity)
        return ExpenseResponse.model_validate(entity, from_attributes=True)

    async def list_expenses(
        self,
        spend_by: Optional[str] = None,
        expense_type: Optional[str] = None,
        sort_by: str = "date",
        sort_order: str = "desc",
        skip: int = 0,
        limit: int = 100,
    ) -> List[ExpenseResponse]:
        """List expenses, sortable by date, amount or spender."""
        filters: Dict[str, Any] = {}
        if spend_by:
            filters["spend_by"] = spend_by
        if expense_type:
            filters["type"] = expense_type

        return await self.get_all(
            skip=skip,
            limit=limit,
            filters=filters or None,
            sort_by=sort_by if sort_by in SORTABLE_FIELDS else "date",
            sort_order=sort_order,
        )

    async def summary(self) -> ExpenseSummary:
        expenses = await self.get_all(limit=DatabaseConstants.MAX_SCAN_LIMIT)
        return summarize_expenses(expenses)
