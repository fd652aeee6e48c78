# ==============================================================================
# APPLICATION CONSTANTS - Centralized Configuration Values
# ==============================================================================
# Immutable constants used throughout the application
# Organized by category for easy maintenance
# ==============================================================================

from __future__ import annotations

from typing import Final, Tuple


# ==============================================================================
# API CONSTANTS
# ==============================================================================

class APIConstants:
    """API-related constants."""

    DEFAULT_PAGE_SIZE: Final[int] = 20
    MAX_PAGE_SIZE: Final[int] = 500

    REQUEST_ID_HEADER: Final[str] = "X-Request-ID"
    RESPONSE_TIME_HEADER: Final[str] = "X-Response-Time"
    ACTOR_ID_HEADER: Final[str] = "X-Actor-ID"


# ==============================================================================
# DATABASE CONSTANTS
# ==============================================================================

class DatabaseConstants:
    """Table names and query limits."""

    CATEGORIES_COLLECTION: Final[str] = "categories"
    PRODUCTS_COLLECTION: Final[str] = "products"
    ORDERS_COLLECTION: Final[str] = "orders"
    ORDER_ITEMS_COLLECTION: Final[str] = "order_items"
    ORDER_AUDITS_COLLECTION: Final[str] = "order_audits"
    QUOTATIONS_COLLECTION: Final[str] = "quotations"
    QUOTATION_ITEMS_COLLECTION: Final[str] = "quotation_items"
    VENDORS_COLLECTION: Final[str] = "vendors"
    VENDOR_TRANSACTIONS_COLLECTION: Final[str] = "vendor_transactions"
    EXPENSES_COLLECTION: Final[str] = "expenses"

    # Reducers read whole tables through this limit
    MAX_SCAN_LIMIT: Final[int] = 100_000


# ==============================================================================
# ORDER CONSTANTS
# ==============================================================================

class OrderStatus:
    """Order lifecycle states, as shown to admins."""

    ENQUIRY_RECEIVED: Final[str] = "Enquiry Received"
    PAYMENT_COMPLETED: Final[str] = "Payment Completed"
    PACKING: Final[str] = "Packing"
    SHIPPED: Final[str] = "Shipped"
    DELIVERED: Final[str] = "Delivered"
    CANCELLED: Final[str] = "Cancelled"

    ALL: Final[Tuple[str, ...]] = (
        ENQUIRY_RECEIVED,
        PAYMENT_COMPLETED,
        PACKING,
        SHIPPED,
        DELIVERED,
        CANCELLED,
    )


# Scalar order fields compared when building an audit diff
AUDITED_ORDER_FIELDS: Final[Tuple[str, ...]] = (
    "full_name",
    "email",
    "phone",
    "alternate_phone",
    "address",
    "city",
    "state",
    "pincode",
    "status",
    "lr_number",
    "payment_method",
    "discount_amt",
    "discount_percentage",
)

# Scalar order fields an admin may change while editing an order
EDITABLE_ORDER_FIELDS: Final[Tuple[str, ...]] = (
    "full_name",
    "email",
    "phone",
    "alternate_phone",
    "address",
    "city",
    "district",
    "state",
    "pincode",
    "status",
    "payment_method",
    "referred_by",
    "lr_number",
)


class DiscountMode:
    """How an order discount was entered."""

    AMOUNT: Final[str] = "amount"
    PERCENTAGE: Final[str] = "percentage"


# ==============================================================================
# LEDGER CONSTANTS
# ==============================================================================

class VendorTransactionType:
    """CREDIT is a purchase (raises the payable), DEBIT a payment."""

    CREDIT: Final[str] = "CREDIT"
    DEBIT: Final[str] = "DEBIT"


class ExpenseType:
    """Known expense types; `credit` entries are money coming in."""

    SPEND: Final[str] = "spend"
    CREDIT: Final[str] = "credit"


# ==============================================================================
# ANALYTICS CONSTANTS
# ==============================================================================

class DashboardRange:
    """Preset date ranges for dashboard analytics."""

    ALL: Final[str] = "all"
    TODAY: Final[str] = "today"
    LAST_90: Final[str] = "last90"
    WEEK: Final[str] = "week"
    MONTH: Final[str] = "month"
    YEAR: Final[str] = "year"
    SEASON_PREFIX: Final[str] = "season-"

    DEFAULT: Final[str] = ALL
    ALL_TIME_START_YEAR: Final[int] = 2020
    ALL_TIME_END_YEAR: Final[int] = 2100
