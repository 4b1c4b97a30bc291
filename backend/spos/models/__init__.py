from .storage import StorageEntry
from .inventory import Product, SaleRecord
from .auth import User

__all__ = [
    'StorageEntry',
    'Product', 'SaleRecord',
    'User',
]
