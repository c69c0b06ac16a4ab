from .accounts import Account, ACCOUNT_ROLES, ACCOUNT_STATUSES
from .catalog import Product
from .orders import Order, ORDER_STATUSES, OPEN_ORDER_STATUSES

__all__ = [
    'Account', 'ACCOUNT_ROLES', 'ACCOUNT_STATUSES',
    'Product',
    'Order', 'ORDER_STATUSES', 'OPEN_ORDER_STATUSES',
]
