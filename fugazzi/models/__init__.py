from .balances import StoredBalance

__all__ = [
    "StoredBalance",
]
