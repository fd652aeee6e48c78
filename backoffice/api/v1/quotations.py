# ==============================================================================
# QUOTATION ENDPOINTS
# ==============================================================================

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Query, status

from backoffice.api.dependencies import QuotationServiceDep
from backoffice.core.constants import APIConstants
from backoffice.schemas.base import APIResponse
from backoffice.schemas.quotation import QuotationResponse, QuotationSave

router = APIRouter(prefix="/quotations", tags=["Quotations"])


@router.post(
    "",
    response_model=APIResponse[QuotationResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create quotation",
)
async def create_quotation(
    schema: QuotationSave,
    service: QuotationServiceDep,
) -> APIResponse[QuotationResponse]:
    quotation = await service.save_quotation(schema)
    return APIResponse.ok(data=quotation, message="Quotation saved")


@router.get(
    "",
    response_model=APIResponse[List[QuotationResponse]],
    summary="List quotations",
)
async def list_quotations(
    service: QuotationServiceDep,
    skip: int = Query(0, ge=0),
    limit: int = Query(APIConstants.DEFAULT_PAGE_SIZE, ge=1, le=APIConstants.MAX_PAGE_SIZE),
) -> APIResponse[List[QuotationResponse]]:
    return APIResponse.ok(data=await service.list_quotations(skip=skip, limit=limit))


@router.get(
    "/{quotation_id}",
    response_model=APIResponse[QuotationResponse],
    summary="Get quotation",
)
async def get_quotation(
    quotation_id: str,
    service: QuotationServiceDep,
) -> APIResponse[QuotationResponse]:
    return APIResponse.ok(data=await service.get_quotation(quotation_id))


@router.put(
    "/{quotation_id}",
    response_model=APIResponse[QuotationResponse],
    summary="Replace quotation",
)
async def update_quotation(
    quotation_id: str,
    schema: QuotationSave,
    service: QuotationServiceDep,
) -> APIResponse[QuotationResponse]:
    quotation = await service.save_quotation(schema, existing_id=quotation_id)
    return APIResponse.ok(data=quotation, message="Quotation updated")


@router.delete(
    "/{quotation_id}",
    response_model=APIResponse[dict],
    summary="Delete quotation",
)
async def delete_quotation(
    quotation_id: str,
    service: QuotationServiceDep,
) -> APIResponse[dict]:
    await service.delete_quotation(quotation_id)
    return APIResponse.ok(data={"deleted": True}, message="Quotation deleted")
