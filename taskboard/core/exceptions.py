"""
Row store exceptions
"""


class StoreError(Exception):
    """Base exception for row store failures"""
    pass


class StoreConnectionError(StoreError):
    """Store is unreachable or not connected"""
    pass


class StoreQueryError(StoreError):
    """A statement failed inside the store"""
    pass
