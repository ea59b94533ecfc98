"""StoreHub order console: order reconciliation client for the StoreHub back office."""

__version__ = "0.1.0"
