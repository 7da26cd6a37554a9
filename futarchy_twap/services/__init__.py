from .connection_pool import ConnectionPool

__all__ = [
    "ConnectionPool"
]
