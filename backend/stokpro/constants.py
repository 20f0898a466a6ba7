# Overview: Enumerated domain values shared by DTOs, models and services.

PAYMENT_METHODS = ("nakit", "kredi_karti", "havale")
SALE_PAYMENT_METHODS = PAYMENT_METHODS + ("veresiye",)
CREDIT_METHOD = "veresiye"

SALE_TYPES = ("retail", "wholesale")
SALE_STATUSES = ("completed", "cancelled")

ACCOUNT_TYPES = ("kasa", "banka")
MOVEMENT_TYPES = ("gelir", "gider")
ALL_MOVEMENT_TYPES = MOVEMENT_TYPES + ("transfer_in", "transfer_out")

# Customer ledger: borc = customer owes more, alacak = customer credited.
LEDGER_DEBIT = "borc"
LEDGER_CREDIT = "alacak"

EXPENSE_CATEGORIES = ("kira", "vergi", "maas", "fatura", "diger")
RECURRENCE_PERIODS = ("aylik", "yillik")

STOCK_ADJUSTMENT_TYPES = ("add", "subtract", "set")
STOCK_TRANSFER_STATUSES = ("pending", "in_transit", "completed", "cancelled")
STOCK_MOVEMENT_TYPES = ("sale", "return", "transfer_in", "transfer_out", "adjustment", "purchase")

QUOTE_STATUSES = ("draft", "sent", "accepted", "rejected", "expired", "converted")

E_DOCUMENT_TYPES = ("e_fatura", "e_arsiv", "e_ihracat", "e_irsaliye", "e_smm")
E_DOCUMENT_REFERENCE_TYPES = ("sale", "return", "waybill")
E_DOCUMENT_STATUSES = ("draft", "pending", "sent", "approved", "rejected", "cancelled")
E_DOCUMENT_PREFIXES = {
    "e_fatura": "EFT",
    "e_arsiv": "EAR",
    "e_ihracat": "EIH",
    "e_irsaliye": "EIR",
    "e_smm": "ESM",
}
INVOICE_DOCUMENT_TYPES = ("e_fatura", "e_arsiv")

TENANT_STATUSES = ("active", "trial", "suspended", "cancelled")
LOGIN_TENANT_STATUSES = ("active", "trial")
USER_STATUSES = ("active", "inactive", "suspended")

ROLE_SUPER_ADMIN = "super_admin"
ROLE_TENANT_ADMIN = "tenant_admin"
ROLE_USER = "user"
ROLES = (ROLE_SUPER_ADMIN, ROLE_TENANT_ADMIN, ROLE_USER)
TENANT_ROLES = (ROLE_TENANT_ADMIN, ROLE_USER)
INVITATION_STATUSES = ("pending", "accepted", "expired")
WILDCARD_PERMISSION = "*"

BILLING_PERIODS = ("monthly", "yearly")

DEFAULT_UNIT = "adet"
DEFAULT_VAT_RATE = 20
DEFAULT_MIN_STOCK_LEVEL = 5
DEFAULT_CURRENCY = "TRY"
