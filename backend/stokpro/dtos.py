# Overview: Request shapes for every API input, expressed as explicit constraint lists.

from __future__ import annotations

from .constants import (
    ACCOUNT_TYPES,
    ALL_MOVEMENT_TYPES,
    BILLING_PERIODS,
    DEFAULT_CURRENCY,
    DEFAULT_MIN_STOCK_LEVEL,
    DEFAULT_UNIT,
    DEFAULT_VAT_RATE,
    E_DOCUMENT_REFERENCE_TYPES,
    E_DOCUMENT_STATUSES,
    E_DOCUMENT_TYPES,
    EXPENSE_CATEGORIES,
    MOVEMENT_TYPES,
    PAYMENT_METHODS,
    QUOTE_STATUSES,
    RECURRENCE_PERIODS,
    SALE_PAYMENT_METHODS,
    SALE_STATUSES,
    SALE_TYPES,
    STOCK_ADJUSTMENT_TYPES,
    STOCK_MOVEMENT_TYPES,
    STOCK_TRANSFER_STATUSES,
    INVITATION_STATUSES,
    TENANT_ROLES,
    TENANT_STATUSES,
    USER_STATUSES,
)
from .permissions import ALL_PERMISSIONS
from .validation import (
    Dto,
    as_date,
    as_datetime,
    as_decimal,
    as_int,
    as_upper,
    as_uuid,
    each_in,
    is_array,
    is_bool,
    is_date_string,
    is_email,
    is_in,
    is_int,
    is_number,
    is_object,
    is_string,
    is_uuid,
    matches,
    max_length,
    maximum,
    min_items,
    min_length,
    minimum,
    optional,
    query_bool,
    query_int,
    required,
)

PASSWORD_RULE = matches(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)",
    "{field} must contain an uppercase letter, a lowercase letter and a digit",
)


def _money(name, *checks, default=None, optional_field=False):
    if optional_field or default is not None:
        kwargs = {"default": default} if default is not None else {}
        return optional(name, is_number(), *checks, coerce=as_decimal, **kwargs)
    return required(name, is_number(), *checks, coerce=as_decimal)


# =============================================================================
# QUERY STRING
# =============================================================================

PaginationDto = Dto("PaginationDto", [
    optional("page", is_int(), minimum(1), default=1, pre=query_int, coerce=as_int),
    optional("limit", is_int(), minimum(1), maximum(100), default=20, pre=query_int, coerce=as_int),
    optional("sort_by", is_string(), default="created_at"),
    optional("sort_order", is_in(("asc", "desc")), default="desc"),
    optional("search", is_string()),
])


def _flag(name):
    return optional(name, is_bool(), pre=query_bool)


def _ref(name):
    return optional(name, is_uuid(), coerce=as_uuid)


def _one_of(name, values):
    return optional(name, is_string(), is_in(values))


DATE_RANGE = (
    optional("start_date", is_date_string(), coerce=as_date),
    optional("end_date", is_date_string(), coerce=as_date),
)

DateRangeDto = Dto("DateRangeDto", DATE_RANGE)

ProductListDto = PaginationDto.extend("ProductListDto", optional("category", is_string()), _flag("is_active"))
CustomerListDto = PaginationDto.extend("CustomerListDto", _flag("is_active"))
SaleListDto = PaginationDto.extend(
    "SaleListDto",
    _one_of("status", SALE_STATUSES),
    _ref("customer_id"),
    _one_of("payment_method", SALE_PAYMENT_METHODS),
    _one_of("sale_type", SALE_TYPES),
    _flag("invoice_issued"),
    *DATE_RANGE,
)
PaymentListDto = PaginationDto.extend("PaymentListDto", _ref("customer_id"), _one_of("method", PAYMENT_METHODS), *DATE_RANGE)
ReturnListDto = PaginationDto.extend("ReturnListDto", _ref("customer_id"), _ref("sale_id"), *DATE_RANGE)
WarehouseListDto = PaginationDto.extend("WarehouseListDto", _flag("is_active"))
StockMovementListDto = PaginationDto.extend(
    "StockMovementListDto",
    _ref("warehouse_id"),
    _ref("product_id"),
    _one_of("movement_type", STOCK_MOVEMENT_TYPES),
    *DATE_RANGE,
)
StockTransferListDto = PaginationDto.extend(
    "StockTransferListDto",
    _one_of("status", STOCK_TRANSFER_STATUSES),
    _ref("warehouse_id"),
)
AccountListDto = PaginationDto.extend("AccountListDto", _one_of("account_type", ACCOUNT_TYPES), _flag("is_active"))
AccountMovementListDto = PaginationDto.extend(
    "AccountMovementListDto",
    _one_of("movement_type", ALL_MOVEMENT_TYPES),
    *DATE_RANGE,
)
AccountTransferListDto = PaginationDto.extend("AccountTransferListDto", _ref("account_id"), *DATE_RANGE)
ExpenseListDto = PaginationDto.extend(
    "ExpenseListDto",
    _one_of("category", EXPENSE_CATEGORIES),
    _flag("is_recurring"),
    *DATE_RANGE,
)
QuoteListDto = PaginationDto.extend("QuoteListDto", _one_of("status", QUOTE_STATUSES), _ref("customer_id"))
EDocumentListDto = PaginationDto.extend(
    "EDocumentListDto",
    _one_of("document_type", E_DOCUMENT_TYPES),
    _one_of("status", E_DOCUMENT_STATUSES),
    _one_of("reference_type", E_DOCUMENT_REFERENCE_TYPES),
    *DATE_RANGE,
)
TenantListDto = PaginationDto.extend("TenantListDto", _one_of("status", TENANT_STATUSES))
ActivityListDto = PaginationDto.extend("ActivityListDto", optional("action", is_string()))
PlanListDto = Dto("PlanListDto", [_flag("include_inactive")])

RenewalQueryDto = Dto("RenewalQueryDto", [
    optional("days", is_int(), minimum(1), maximum(365), default=90, pre=query_int, coerce=as_int),
])

UserListDto = PaginationDto.extend("UserListDto", _one_of("role", TENANT_ROLES), _one_of("status", USER_STATUSES))
InvitationListDto = PaginationDto.extend("InvitationListDto", _one_of("status", INVITATION_STATUSES))

ReportRangeDto = Dto("ReportRangeDto", [
    *DATE_RANGE,
    optional("limit", is_int(), minimum(1), maximum(100), default=10, pre=query_int, coerce=as_int),
])

UpcomingPaymentsDto = Dto("UpcomingPaymentsDto", [
    optional("days", is_int(), minimum(1), maximum(365), default=30, pre=query_int, coerce=as_int),
])

FeatureQueryDto = Dto("FeatureQueryDto", [required("feature", is_string(), min_length(1))])
LimitQueryDto = Dto("LimitQueryDto", [required("resource", is_string(), min_length(1))])


# =============================================================================
# PRODUCTS
# =============================================================================

CreateProductDto = Dto("CreateProductDto", [
    required("name", is_string(), min_length(2), max_length(255)),
    optional("barcode", is_string(), max_length(50)),
    optional("category", is_string(), max_length(100)),
    optional("unit", is_string(), max_length(20), default=DEFAULT_UNIT),
    _money("purchase_price", minimum(0)),
    _money("sale_price", minimum(0)),
    _money("wholesale_price", minimum(0), default=0),
    _money("vat_rate", minimum(0), maximum(100), default=DEFAULT_VAT_RATE),
    optional("stock_quantity", is_int(), minimum(0), default=0, coerce=as_int),
    optional("min_stock_level", is_int(), minimum(0), default=DEFAULT_MIN_STOCK_LEVEL, coerce=as_int),
    optional("is_active", is_bool(), default=True),
])

UpdateProductDto = CreateProductDto.partial("UpdateProductDto")


# =============================================================================
# CUSTOMERS
# =============================================================================

CreateCustomerDto = Dto("CreateCustomerDto", [
    required("name", is_string(), min_length(2), max_length(255)),
    optional("phone", is_string(), max_length(20)),
    optional("email", is_email(), max_length(255)),
    optional("address", is_string()),
    optional("tax_number", is_string(), max_length(20)),
    optional("tax_office", is_string(), max_length(100)),
    optional("notes", is_string()),
    optional("is_active", is_bool(), default=True),
    optional("renewal_red_days", is_int(), minimum(1), maximum(365), default=30, coerce=as_int),
    optional("renewal_yellow_days", is_int(), minimum(1), maximum(365), default=60, coerce=as_int),
])

UpdateCustomerDto = CreateCustomerDto.partial("UpdateCustomerDto")


# =============================================================================
# SALES
# =============================================================================

SaleItemDto = Dto("SaleItemDto", [
    required("product_id", is_uuid(), coerce=as_uuid),
    required("quantity", is_int(), minimum(1), coerce=as_int),
    _money("unit_price", minimum(0)),
    _money("discount_rate", minimum(0), maximum(100), default=0),
])

CreateSaleDto = Dto("CreateSaleDto", [
    optional("customer_id", is_uuid(), coerce=as_uuid),
    optional("warehouse_id", is_uuid(), coerce=as_uuid),
    optional("sale_date", is_date_string(), coerce=as_datetime),
    required("items", is_array(), min_items(1), items=SaleItemDto),
    _money("discount_amount", minimum(0), default=0),
    _money("discount_rate", minimum(0), maximum(100), default=0),
    optional("include_vat", is_bool(), default=True),
    required("payment_method", is_string(), is_in(SALE_PAYMENT_METHODS)),
    optional("due_date", is_date_string(), coerce=as_date),
    optional("sale_type", is_string(), is_in(SALE_TYPES), default="retail"),
    optional("notes", is_string()),
    optional("has_renewal", is_bool(), default=False),
    optional("renewal_date", is_date_string(), coerce=as_date),
    optional("reminder_days_before", is_int(), minimum(1), maximum(365), default=30, coerce=as_int),
    optional("reminder_note", is_string()),
])

UpdateInvoiceIssuedDto = Dto("UpdateInvoiceIssuedDto", [
    required("invoice_issued", is_bool()),
])


# =============================================================================
# PAYMENTS
# =============================================================================

CreatePaymentDto = Dto("CreatePaymentDto", [
    required("customer_id", is_uuid(), coerce=as_uuid),
    optional("sale_id", is_uuid(), coerce=as_uuid),
    optional("account_id", is_uuid(), coerce=as_uuid),
    _money("amount", minimum(0.01)),
    required("method", is_string(), is_in(PAYMENT_METHODS)),
    optional("payment_date", is_date_string(), coerce=as_datetime),
    optional("notes", is_string()),
])


# =============================================================================
# RETURNS
# =============================================================================

ReturnItemDto = Dto("ReturnItemDto", [
    required("product_id", is_uuid(), coerce=as_uuid),
    optional("sale_item_id", is_uuid(), coerce=as_uuid),
    required("quantity", is_int(), minimum(1), coerce=as_int),
    _money("unit_price", minimum(0)),
    _money("vat_rate", minimum(0), maximum(100), optional_field=True),
])

CreateReturnDto = Dto("CreateReturnDto", [
    optional("sale_id", is_uuid(), coerce=as_uuid),
    optional("customer_id", is_uuid(), coerce=as_uuid),
    optional("warehouse_id", is_uuid(), coerce=as_uuid),
    required("items", is_array(), min_items(1), items=ReturnItemDto),
    optional("reason", is_string()),
])


# =============================================================================
# WAREHOUSES
# =============================================================================

CreateWarehouseDto = Dto("CreateWarehouseDto", [
    required("name", is_string(), min_length(2), max_length(100)),
    required("code", is_string(), min_length(1), max_length(20), coerce=as_upper),
    optional("address", is_string()),
    optional("phone", is_string(), max_length(20)),
    optional("manager_name", is_string(), max_length(100)),
    optional("is_default", is_bool(), default=False),
])

UpdateWarehouseDto = CreateWarehouseDto.partial(
    "UpdateWarehouseDto",
    optional("is_active", is_bool(), nullable=False),
)

AdjustStockDto = Dto("AdjustStockDto", [
    required("product_id", is_uuid(), coerce=as_uuid),
    required("quantity", is_int(), minimum(0), coerce=as_int),
    required("adjustment_type", is_string(), is_in(STOCK_ADJUSTMENT_TYPES)),
    optional("notes", is_string()),
])

StockTransferItemDto = Dto("StockTransferItemDto", [
    required("product_id", is_uuid(), coerce=as_uuid),
    required("quantity", is_int(), minimum(1), coerce=as_int),
])

CreateStockTransferDto = Dto("CreateStockTransferDto", [
    required("from_warehouse_id", is_uuid(), coerce=as_uuid),
    required("to_warehouse_id", is_uuid(), coerce=as_uuid),
    required("items", is_array(), min_items(1), items=StockTransferItemDto),
    optional("notes", is_string()),
    optional("transfer_date", is_date_string(), coerce=as_datetime),
])


# =============================================================================
# ACCOUNTS
# =============================================================================

CreateAccountDto = Dto("CreateAccountDto", [
    required("name", is_string(), min_length(2), max_length(100)),
    required("account_type", is_string(), is_in(ACCOUNT_TYPES)),
    optional("bank_name", is_string(), max_length(100)),
    optional("iban", is_string(), max_length(34)),
    optional("account_number", is_string(), max_length(50)),
    optional("branch_name", is_string(), max_length(100)),
    optional("currency", is_string(), max_length(3), default=DEFAULT_CURRENCY),
    _money("opening_balance", minimum(0), default=0),
    optional("is_default", is_bool(), default=False),
])

UpdateAccountDto = Dto("UpdateAccountDto", [
    optional("name", is_string(), min_length(2), max_length(100), nullable=False),
    optional("bank_name", is_string(), max_length(100)),
    optional("iban", is_string(), max_length(34)),
    optional("account_number", is_string(), max_length(50)),
    optional("branch_name", is_string(), max_length(100)),
    optional("is_default", is_bool(), nullable=False),
    optional("is_active", is_bool(), nullable=False),
])

CreateMovementDto = Dto("CreateMovementDto", [
    required("movement_type", is_string(), is_in(MOVEMENT_TYPES)),
    _money("amount", minimum(0.01)),
    optional("category", is_string(), max_length(50)),
    optional("description", is_string()),
    optional("reference_type", is_string(), max_length(20)),
    optional("reference_id", is_uuid(), coerce=as_uuid),
    optional("movement_date", is_date_string(), coerce=as_datetime),
])

CreateTransferDto = Dto("CreateTransferDto", [
    required("from_account_id", is_uuid(), coerce=as_uuid),
    required("to_account_id", is_uuid(), coerce=as_uuid),
    _money("amount", minimum(0.01)),
    optional("description", is_string()),
    optional("transfer_date", is_date_string(), coerce=as_datetime),
])


# =============================================================================
# EXPENSES
# =============================================================================

CreateExpenseDto = Dto("CreateExpenseDto", [
    required("category", is_string(), is_in(EXPENSE_CATEGORIES)),
    optional("description", is_string()),
    _money("amount", minimum(0.01)),
    required("expense_date", is_date_string(), coerce=as_date),
    optional("is_recurring", is_bool(), default=False),
    optional("recurrence_period", is_string(), is_in(RECURRENCE_PERIODS)),
    optional("account_id", is_uuid(), coerce=as_uuid),
])

UpdateExpenseDto = CreateExpenseDto.partial("UpdateExpenseDto")


# =============================================================================
# QUOTES
# =============================================================================

QuoteItemDto = Dto("QuoteItemDto", [
    required("product_id", is_uuid(), coerce=as_uuid),
    required("product_name", is_string(), min_length(1), max_length(255)),
    required("quantity", is_int(), minimum(1), coerce=as_int),
    _money("unit_price", minimum(0)),
    _money("discount_rate", minimum(0), maximum(100), default=0),
    _money("vat_rate", minimum(0), maximum(100), default=DEFAULT_VAT_RATE),
])

CreateQuoteDto = Dto("CreateQuoteDto", [
    optional("customer_id", is_uuid(), coerce=as_uuid),
    required("valid_until", is_date_string(), coerce=as_date),
    required("items", is_array(), min_items(1), items=QuoteItemDto),
    _money("discount_amount", minimum(0), default=0),
    _money("discount_rate", minimum(0), maximum(100), default=0),
    optional("include_vat", is_bool(), default=True),
    optional("notes", is_string()),
])

UpdateQuoteDto = CreateQuoteDto.partial("UpdateQuoteDto")

ConvertToSaleDto = Dto("ConvertToSaleDto", [
    required("payment_method", is_string(), is_in(SALE_PAYMENT_METHODS)),
    optional("warehouse_id", is_uuid(), coerce=as_uuid),
    optional("due_date", is_date_string(), coerce=as_date),
    optional("notes", is_string()),
])


# =============================================================================
# E-DOCUMENTS
# =============================================================================

CreateEDocumentDto = Dto("CreateEDocumentDto", [
    required("document_type", is_string(), is_in(E_DOCUMENT_TYPES)),
    required("reference_type", is_string(), is_in(E_DOCUMENT_REFERENCE_TYPES)),
    required("reference_id", is_uuid(), coerce=as_uuid),
    optional("notes", is_string()),
])


# =============================================================================
# AUTH
# =============================================================================

RegisterDto = Dto("RegisterDto", [
    required("company_name", is_string(), min_length(2), max_length(255)),
    required("name", is_string(), min_length(2), max_length(255)),
    required("email", is_email(), max_length(255)),
    required("password", is_string(), min_length(8), PASSWORD_RULE),
    optional("phone", is_string(), max_length(20)),
])

LoginDto = Dto("LoginDto", [
    required("email", is_email()),
    required("password", is_string(), min_length(6)),
])

RefreshTokenDto = Dto("RefreshTokenDto", [
    required("refresh_token", is_string(), min_length(1)),
])

ForgotPasswordDto = Dto("ForgotPasswordDto", [
    required("email", is_email()),
])

ResetPasswordDto = Dto("ResetPasswordDto", [
    required("token", is_string(), min_length(1)),
    required("password", is_string(), min_length(8), PASSWORD_RULE),
])


# =============================================================================
# PLATFORM ADMIN
# =============================================================================

CreatePlanDto = Dto("CreatePlanDto", [
    required("name", is_string(), min_length(2), max_length(100)),
    required("code", is_string(), min_length(2), max_length(50)),
    _money("price", minimum(0)),
    optional("billing_period", is_string(), is_in(BILLING_PERIODS), default="monthly"),
    optional("features", is_object(), default=dict),
    optional("limits", is_object(), default=dict),
    optional("is_active", is_bool(), default=True),
    optional("sort_order", is_int(), coerce=as_int, default=0),
])

UpdatePlanDto = Dto("UpdatePlanDto", [
    f for f in CreatePlanDto.partial("UpdatePlanDto").fields if f.name != "code"
])

CreateTenantDto = Dto("CreateTenantDto", [
    required("name", is_string(), min_length(2), max_length(255)),
    optional("slug", is_string(), matches(r"^[a-z0-9]+(-[a-z0-9]+)*$", "{field} must be a lowercase slug"), max_length(100)),
    optional("domain", is_string(), max_length(255)),
    optional("plan_id", is_uuid(), coerce=as_uuid),
    optional("billing_email", is_email(), max_length(255)),
    optional("status", is_string(), is_in(TENANT_STATUSES), default="active"),
])

UpdateTenantDto = Dto("UpdateTenantDto", [
    optional("name", is_string(), min_length(2), max_length(255), nullable=False),
    optional("domain", is_string(), max_length(255)),
    optional("plan_id", is_uuid(), coerce=as_uuid),
    optional("billing_email", is_email(), max_length(255)),
    optional("status", is_string(), is_in(TENANT_STATUSES), nullable=False),
    optional("settings", is_object(), nullable=False),
])

CreateUserDto = Dto("CreateUserDto", [
    required("email", is_email(), max_length(255)),
    required("name", is_string(), min_length(2), max_length(255)),
    required("password", is_string(), min_length(8), PASSWORD_RULE),
    optional("role", is_string(), is_in(TENANT_ROLES), default="user"),
    optional("phone", is_string(), max_length(20)),
])

CreateInvitationDto = Dto("CreateInvitationDto", [
    required("email", is_email(), max_length(255)),
    optional("role", is_string(), is_in(TENANT_ROLES), default="user"),
    optional("tenant_id", is_uuid(), coerce=as_uuid),
    optional("tenant_name", is_string(), min_length(2), max_length(255)),
])

RegisterWithInvitationDto = Dto("RegisterWithInvitationDto", [
    required("token", is_string(), min_length(1)),
    required("name", is_string(), min_length(2), max_length(255)),
    required("password", is_string(), min_length(8), PASSWORD_RULE),
    optional("phone", is_string(), max_length(20)),
])


# =============================================================================
# TENANT USERS AND SETTINGS
# =============================================================================

PERMISSION_CODES = ("*",) + ALL_PERMISSIONS

CreateTenantUserDto = CreateUserDto.extend(
    "CreateTenantUserDto",
    optional("permissions", is_array(), each_in(PERMISSION_CODES)),
)

UpdateUserDto = Dto("UpdateUserDto", [
    optional("email", is_email(), max_length(255), nullable=False),
    optional("name", is_string(), min_length(2), max_length(255), nullable=False),
    optional("phone", is_string(), max_length(20)),
    optional("avatar_url", is_string(), max_length(500)),
    optional("role", is_string(), is_in(TENANT_ROLES), nullable=False),
    optional("permissions", is_array(), each_in(PERMISSION_CODES), nullable=False),
    optional("status", is_string(), is_in(USER_STATUSES), nullable=False),
])

ChangePasswordDto = Dto("ChangePasswordDto", [
    required("current_password", is_string(), min_length(1)),
    required("new_password", is_string(), min_length(8), PASSWORD_RULE),
])

UpdateSettingsDto = Dto("UpdateSettingsDto", [
    optional("name", is_string(), min_length(2), max_length(255), nullable=False),
    optional("domain", is_string(), max_length(255)),
    optional("logo_url", is_string(), max_length(500)),
    optional("billing_email", is_email(), max_length(255)),
    optional("settings", is_object(), nullable=False),
])
