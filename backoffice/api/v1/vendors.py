# ==============================================================================
# VENDOR ENDPOINTS - Suppliers and Ledger
# ==============================================================================

from __future__ import annotations

from typing import List

from fastapi import APIRouter, status

from backoffice.api.dependencies import VendorServiceDep, VendorTransactionServiceDep
from backoffice.schemas.base import APIResponse
from backoffice.schemas.vendor import (
    VendorCreate,
    VendorLedger,
    VendorResponse,
    VendorTransactionCreate,
    VendorTransactionResponse,
    VendorTransactionUpdate,
)

router = APIRouter(prefix="/vendors", tags=["Vendors"])


@router.get(
    "",
    response_model=APIResponse[List[VendorResponse]],
    summary="List vendors",
)
async def list_vendors(
    service: VendorServiceDep,
) -> APIResponse[List[VendorResponse]]:
    return APIResponse.ok(data=await service.list_vendors())


@router.post(
    "",
    response_model=APIResponse[VendorResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create vendor",
)
async def create_vendor(
    schema: VendorCreate,
    service: VendorServiceDep,
) -> APIResponse[VendorResponse]:
    vendor = await service.create(schema)
    return APIResponse.ok(data=vendor, message="Vendor created successfully")


@router.put(
    "/{vendor_id}",
    response_model=APIResponse[VendorResponse],
    summary="Update vendor",
)
async def update_vendor(
    vendor_id: str,
    schema: VendorCreate,
    service: VendorServiceDep,
) -> APIResponse[VendorResponse]:
    vendor = await service.update(vendor_id, schema)
    return APIResponse.ok(data=vendor, message="Vendor updated successfully")


@router.delete(
    "/{vendor_id}",
    response_model=APIResponse[dict],
    summary="Delete vendor",
    description="Deletes the vendor together with its ledger entries.",
)
async def delete_vendor(
    vendor_id: str,
    service: VendorServiceDep,
) -> APIResponse[dict]:
    await service.delete(vendor_id)
    return APIResponse.ok(data={"deleted": True}, message="Vendor deleted")


@router.get(
    "/{vendor_id}/ledger",
    response_model=APIResponse[VendorLedger],
    summary="Vendor ledger",
    description="Transactions in date order with the running payable balance.",
)
async def get_ledger(
    vendor_id: str,
    service: VendorServiceDep,
) -> APIResponse[VendorLedger]:
    return APIResponse.ok(data=await service.get_ledger(vendor_id))


@router.post(
    "/{vendor_id}/transactions",
    response_model=APIResponse[VendorTransactionResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Record purchase or payment",
)
async def add_transaction(
    vendor_id: str,
    schema: VendorTransactionCreate,
    service: VendorServiceDep,
) -> APIResponse[VendorTransactionResponse]:
    transaction = await service.add_transaction(vendor_id, schema)
    return APIResponse.ok(data=transaction, message="Transaction recorded")


@router.patch(
    "/transactions/{transaction_id}",
    response_model=APIResponse[VendorTransactionResponse],
    summary="Update ledger entry",
)
async def update_transaction(
    transaction_id: str,
    schema: VendorTransactionUpdate,
    service: VendorTransactionServiceDep,
) -> APIResponse[VendorTransactionResponse]:
    transaction = await service.update(transaction_id, schema)
    return APIResponse.ok(data=transaction, message="Transaction updated")


@router.delete(
    "/transactions/{transaction_id}",
    response_model=APIResponse[dict],
    summary="Delete ledger entry",
)
async def delete_transaction(
    transaction_id: str,
    service: VendorTransactionServiceDep,
) -> APIResponse[dict]:
    await service.delete(transaction_id)
    return APIResponse.ok(data={"deleted": True}, message="Transaction deleted")
