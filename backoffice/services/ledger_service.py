# ==============================================================================
# LEDGER SERVICE - Vendors and Their Running Balance
# ==============================================================================

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, List

from backoffice.core.constants import DatabaseConstants, VendorTransactionType
from backoffice.database.adapters.base_adapter import BaseDatabaseAdapter
from backoffice.schemas.vendor import (
    LedgerEntry,
    VendorCreate,
    VendorLedger,
    VendorResponse,
    VendorTransactionCreate,
    VendorTransactionResponse,
    VendorTransactionUpdate,
)
from backoffice.services.base_service import BaseService
from backoffice.utils.helpers import ensure_aware

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def build_ledger(
    vendor: VendorResponse,
    transactions: List[VendorTransactionResponse],
) -> VendorLedger:
    """
    Order a vendor's transactions and carry the payable balance.

    Rows are sorted by transaction date, then by creation time. CREDIT
    (a purchase) raises the balance and DEBIT (a payment) lowers it.
    """
    ordered = sorted(
        transactions,
        key=lambda txn: (
            txn.transaction_date,
            ensure_aware(txn.created_at) if txn.created_at else _EPOCH,
        ),
    )

    balance = Decimal("0")
    total_credit = Decimal("0")
    total_debit = Decimal("0")
    entries: List[LedgerEntry] = []

    for txn in ordered:
        if txn.type == VendorTransactionType.CREDIT:
            balance += txn.amount
            total_credit += txn.amount
        else:
            balance -= txn.amount
            total_debit += txn.amount
        entries.append(LedgerEntry(**txn.model_dump(), running_balance=balance))

    return VendorLedger(
        vendor=vendor,
        entries=entries,
        total_credit=total_credit,
        total_debit=total_debit,
        current_balance=balance,
    )


class VendorService(BaseService[VendorCreate, VendorCreate, VendorResponse]):
    """Vendor records and their ledger."""

    _resource_name = "Vendor"

    def __init__(self, adapter: BaseDatabaseAdapter) -> None:
        super().__init__(adapter, DatabaseConstants.VENDORS_COLLECTION)
        self._transactions = VendorTransactionService(adapter)

    def _to_response(self, entity: Any) -> VendorResponse:
        if isinstance(entity, dict):
            return VendorResponse.model_validate(entity)
        return VendorResponse.model_validate(entity, from_attributes=True)

    async def list_vendors(self) -> List[VendorResponse]:
        return await self.get_all(limit=DatabaseConstants.MAX_SCAN_LIMIT, sort_by="name")

    async def add_transaction(
        self,
        vendor_id: str,
        schema: VendorTransactionCreate,
    ) -> VendorTransactionResponse:
        """Record a purchase or payment against a vendor."""
        await self.get_by_id(vendor_id)
        return await self._transactions.create_for_vendor(vendor_id, schema)

    async def get_ledger(self, vendor_id: str) -> VendorLedger:
        vendor = await self.get_by_id(vendor_id)
        transactions = await self._transactions.get_all(
            limit=DatabaseConstants.MAX_SCAN_LIMIT,
            filters={"vendor_id": vendor_id},
        )
        return build_ledger(vendor, transactions)

    async def delete(self, id: Any) -> bool:
        """Delete a vendor with its ledger."""
        await self.get_by_id(id)
        removed = await self._adapter.bulk_delete(
            DatabaseConstants.VENDOR_TRANSACTIONS_COLLECTION, {"vendor_id": id}
        )
        logger.info(f"Deleting vendor {id} and {removed} ledger entries")
        return await super().delete(id)


class VendorTransactionService(
    BaseService[VendorTransactionCreate, VendorTransactionUpdate, VendorTransactionResponse]
):
    """Individual ledger entries."""

    _resource_name = "Vendor transaction"

    def __init__(self, adapter: BaseDatabaseAdapter) -> None:
        super().__init__(adapter, DatabaseConstants.VENDOR_TRANSACTIONS_COLLECTION)

    def _to_response(self, entity: Any) -> VendorTransactionResponse:
        if isinstance(entity, dict):
            return VendorTransactionResponse.model_validate(entity)
        return VendorTransactionResponse.model_validate(entity, from_attributes=True)

    async def create_for_vendor(
        self,
        vendor_id: str,
        schema: VendorTransactionCreate,
    ) -> VendorTransactionResponse:
        data = schema.model_dump()
        data["vendor_id"] = vendor_id
        result = await self._adapter.create(self._collection_name, data)
        return self._to_response(result)
