"""
View models - framework-agnostic data transformation layer.

ViewModels MUST NOT:
- Import rendering modules
- Hold widget references
"""

from .base import BaseViewModel, CellUpdate, RowUpdate, TableUpdate
from .notification_vm import NotificationViewModel
from .order_detail_vm import OrderDetailDisplay, OrderDetailViewModel
from .order_list_vm import OrderListViewModel

__all__ = [
    "BaseViewModel",
    "CellUpdate",
    "RowUpdate",
    "TableUpdate",
    "NotificationViewModel",
    "OrderDetailDisplay",
    "OrderDetailViewModel",
    "OrderListViewModel",
]
