"""In-memory caches for order state."""

from .order_store import OrderStore
from .rcu_store import RCUList, RCURef

__all__ = ["OrderStore", "RCUList", "RCURef"]
