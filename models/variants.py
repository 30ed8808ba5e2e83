'''Backing representations available to flag stores'''
from enum import Enum

__all__ = ('StoreVariant',)

class StoreVariant(Enum):
    DENSE_BOUNDED   = 'dense_bounded'       # Fixed-width word array, explicit resize only
    DENSE_UNBOUNDED = 'dense_unbounded'     # Single arbitrary-precision integer
    SPARSE          = 'sparse'              # Set of indices currently true
