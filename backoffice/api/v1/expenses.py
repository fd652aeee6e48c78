# ==============================================================================
# EXPENSE ENDPOINTS
# ==============================================================================

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, status

from backoffice.api.dependencies import ExpenseServiceDep
from backoffice.core.constants import APIConstants
from backoffice.schemas.base import APIResponse
from backoffice.schemas.expense import (
    ExpenseCreate,
    ExpenseResponse,
    ExpenseSummary,
    ExpenseUpdate,
)

router = APIRouter(prefix="/expenses", tags=["Expenses"])


@router.get(
    "",
    response_model=APIResponse[List[ExpenseResponse]],
    summary="List expenses",
)
async def list_expenses(
    service: ExpenseServiceDep,
    spend_by: Optional[str] = Query(None),
    expense_type: Optional[str] = Query(None, alias="type"),
    sort_by: str = Query("date", pattern="^(date|amount|spend_by|created_at)$"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    skip: int = Query(0, ge=0),
    limit: int = Query(APIConstants.MAX_PAGE_SIZE, ge=1, le=APIConstants.MAX_PAGE_SIZE),
) -> APIResponse[List[ExpenseResponse]]:
    expenses = await service.list_expenses(
        spend_by=spend_by,
        expense_type=expense_type,
        sort_by=sort_by,
        sort_order=sort_order,
        skip=skip,
        limit=limit,
    )
    return APIResponse.ok(data=expenses)


@router.get(
    "/summary",
    response_model=APIResponse[ExpenseSummary],
    summary="Expense totals",
)
async def get_summary(
    service: ExpenseServiceDep,
) -> APIResponse[ExpenseSummary]:
    return APIResponse.ok(data=await service.summary())


@router.post(
    "",
    response_model=APIResponse[ExpenseResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Record expense",
)
async def create_expense(
    schema: ExpenseCreate,
    service: ExpenseServiceDep,
) -> APIResponse[ExpenseResponse]:
    expense = await service.create(schema)
    return APIResponse.ok(data=expense, message="Expense recorded")


@router.patch(
    "/{expense_id}",
    response_model=APIResponse[ExpenseResponse],
    summary="Update expense",
)
async def update_expense(
    expense_id: str,
    schema: ExpenseUpdate,
    service: ExpenseServiceDep,
) -> APIResponse[ExpenseResponse]:
    expense = await service.update(expense_id, schema)
    return APIResponse.ok(data=expense, message="Expense updated")


@router.delete(
    "/{expense_id}",
    response_model=APIResponse[dict],
    summary="Delete expense",
)
async def delete_expense(
    expense_id: str,
    service: ExpenseServiceDep,
) -> APIResponse[dict]:
    await service.delete(expense_id)
    return APIResponse.ok(data={"deleted": True}, message="Expense deleted")
