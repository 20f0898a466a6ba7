from .tenancy import Plan, Tenant, TenantActivityLog, TenantInvoice, Invitation
from .auth import User, UserSession, PasswordResetToken
from .customers import Customer, AccountTransaction
from .inventory import Product, Warehouse, WarehouseStock, StockTransfer, StockTransferItem, StockMovement
from .sales import Sale, SaleItem, Payment
from .documents import Return, ReturnItem, Quote, QuoteItem, EDocument, EDocumentLog
from .accounting import Account, AccountMovement, AccountTransfer, Expense

__all__ = [
    'Plan', 'Tenant', 'TenantActivityLog', 'TenantInvoice', 'Invitation',
    'User', 'UserSession', 'PasswordResetToken',
    'Customer', 'AccountTransaction',
    'Product', 'Warehouse', 'WarehouseStock', 'StockTransfer', 'StockTransferItem', 'StockMovement',
    'Sale', 'SaleItem', 'Payment',
    'Return', 'ReturnItem', 'Quote', 'QuoteItem', 'EDocument', 'EDocumentLog',
    'Account', 'AccountMovement', 'AccountTransfer', 'Expense',
]
