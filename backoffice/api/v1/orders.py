# ==============================================================================
# ORDER ENDPOINTS - Placing, Listing, Status and Edits
# ==============================================================================

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, status

from backoffice.api.dependencies import ActorID, OrderServiceDep
from backoffice.core.constants import APIConstants
from backoffice.schemas.base import APIResponse, PaginatedResponse
from backoffice.schemas.order import (
    OrderAuditResponse,
    OrderEditRequest,
    OrderEditResult,
    OrderPlaceRequest,
    OrderResponse,
    StatusUpdate,
)

router = APIRouter(prefix="/orders", tags=["Orders"])


def _saved(result: OrderEditResult, message: str) -> APIResponse[OrderEditResult]:
    if result.warnings:
        message = f"{message} with warnings"
    return APIResponse.ok(data=result, message=message, errors=result.warnings)


@router.post(
    "",
    response_model=APIResponse[OrderEditResult],
    status_code=status.HTTP_201_CREATED,
    summary="Place order",
    description="Place an enquiry order; stock is checked and reserved.",
)
async def place_order(
    schema: OrderPlaceRequest,
    service: OrderServiceDep,
) -> APIResponse[OrderEditResult]:
    result = await service.place_order(schema)
    return _saved(result, "Order placed")


@router.get(
    "",
    response_model=APIResponse[PaginatedResponse[OrderResponse]],
    summary="List orders",
    description="List orders newest first; filter by status or by customer (user_id).",
)
async def list_orders(
    service: OrderServiceDep,
    status_filter: Optional[str] = Query(None, alias="status"),
    user_id: Optional[str] = Query(None, description="Only this customer's orders"),
    skip: int = Query(0, ge=0),
    limit: int = Query(APIConstants.DEFAULT_PAGE_SIZE, ge=1, le=APIConstants.MAX_PAGE_SIZE),
) -> APIResponse[PaginatedResponse[OrderResponse]]:
    orders = await service.list_orders(
        status=status_filter, user_id=user_id, skip=skip, limit=limit
    )
    return APIResponse.ok(data=orders)


@router.get(
    "/{order_id}",
    response_model=APIResponse[OrderResponse],
    summary="Get order",
)
async def get_order(
    order_id: str,
    service: OrderServiceDep,
) -> APIResponse[OrderResponse]:
    return APIResponse.ok(data=await service.get_order(order_id))


@router.get(
    "/{order_id}/audits",
    response_model=APIResponse[List[OrderAuditResponse]],
    summary="Order edit history",
)
async def list_audits(
    order_id: str,
    service: OrderServiceDep,
) -> APIResponse[List[OrderAuditResponse]]:
    return APIResponse.ok(data=await service.list_audits(order_id))


@router.patch(
    "/{order_id}/status",
    response_model=APIResponse[OrderResponse],
    summary="Update order status",
    description="Shipped requires an LR number.",
)
async def update_status(
    order_id: str,
    schema: StatusUpdate,
    service: OrderServiceDep,
) -> APIResponse[OrderResponse]:
    order = await service.update_status(order_id, schema.status, schema.lr_number)
    return APIResponse.ok(data=order, message=f"Order marked {order.status}")


@router.put(
    "/{order_id}",
    response_model=APIResponse[OrderEditResult],
    summary="Edit order",
    description=(
        "Replace an order's details, line items and discount. Stock is "
        "adjusted by the net change and the edit is recorded in the audit trail."
    ),
)
async def edit_order(
    order_id: str,
    schema: OrderEditRequest,
    service: OrderServiceDep,
    actor_id: ActorID,
) -> APIResponse[OrderEditResult]:
    result = await service.edit_order(order_id, schema, changed_by=actor_id)
    return _saved(result, "Order updated")
