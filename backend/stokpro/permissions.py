# Overview: Permission codes checked by require_permission, grouped by module.

"""
Permission codes are "<module>.<action>" strings stored in users.permissions.

super_admin and tenant_admin pass every check, as does a user holding the
wildcard "*"; everyone else needs the explicit code.
"""

PRODUCTS_VIEW = "products.view"
PRODUCTS_CREATE = "products.create"
PRODUCTS_UPDATE = "products.update"
PRODUCTS_DELETE = "products.delete"

CUSTOMERS_VIEW = "customers.view"
CUSTOMERS_CREATE = "customers.create"
CUSTOMERS_UPDATE = "customers.update"
CUSTOMERS_DELETE = "customers.delete"

SALES_VIEW = "sales.view"
SALES_CREATE = "sales.create"
SALES_UPDATE = "sales.update"
SALES_DELETE = "sales.delete"

RETURNS_VIEW = "returns.view"
RETURNS_CREATE = "returns.create"

EXPENSES_VIEW = "expenses.view"
EXPENSES_CREATE = "expenses.create"
EXPENSES_UPDATE = "expenses.update"
EXPENSES_DELETE = "expenses.delete"

ACCOUNTS_VIEW = "accounts.view"
ACCOUNTS_CREATE = "accounts.create"
ACCOUNTS_UPDATE = "accounts.update"
ACCOUNTS_DELETE = "accounts.delete"

WAREHOUSES_VIEW = "warehouses.view"
WAREHOUSES_CREATE = "warehouses.create"
WAREHOUSES_UPDATE = "warehouses.update"
WAREHOUSES_DELETE = "warehouses.delete"

QUOTES_VIEW = "quotes.view"
QUOTES_CREATE = "quotes.create"
QUOTES_UPDATE = "quotes.update"
QUOTES_DELETE = "quotes.delete"

EDOCUMENTS_VIEW = "edocuments.view"
EDOCUMENTS_CREATE = "edocuments.create"
EDOCUMENTS_UPDATE = "edocuments.update"

USERS_VIEW = "users.view"
USERS_MANAGE = "users.manage"

SETTINGS_VIEW = "settings.view"
SETTINGS_MANAGE = "settings.manage"

REPORTS_VIEW = "reports.view"

# Payments are collections against the customer ledger.
PAYMENTS_VIEW = CUSTOMERS_VIEW
PAYMENTS_CREATE = CUSTOMERS_UPDATE

ALL_PERMISSIONS = (
    PRODUCTS_VIEW, PRODUCTS_CREATE, PRODUCTS_UPDATE, PRODUCTS_DELETE,
    CUSTOMERS_VIEW, CUSTOMERS_CREATE, CUSTOMERS_UPDATE, CUSTOMERS_DELETE,
    SALES_VIEW, SALES_CREATE, SALES_UPDATE, SALES_DELETE,
    RETURNS_VIEW, RETURNS_CREATE,
    EXPENSES_VIEW, EXPENSES_CREATE, EXPENSES_UPDATE, EXPENSES_DELETE,
    ACCOUNTS_VIEW, ACCOUNTS_CREATE, ACCOUNTS_UPDATE, ACCOUNTS_DELETE,
    WAREHOUSES_VIEW, WAREHOUSES_CREATE, WAREHOUSES_UPDATE, WAREHOUSES_DELETE,
    QUOTES_VIEW, QUOTES_CREATE, QUOTES_UPDATE, QUOTES_DELETE,
    EDOCUMENTS_VIEW, EDOCUMENTS_CREATE, EDOCUMENTS_UPDATE,
    USERS_VIEW, USERS_MANAGE,
    SETTINGS_VIEW, SETTINGS_MANAGE,
    REPORTS_VIEW,
)
