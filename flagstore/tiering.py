'''Selection of, and conversion between, backing representations'''
from types import MappingProxyType
from typing import Final, Optional

from flagstore.base import FlagStore
from flagstore.dense_bounded import DenseBoundedStore
from flagstore.dense_unbounded import DenseUnboundedStore
from flagstore.errors import OutOfRange
from flagstore.logging import Logger
from flagstore.sparse import SparseStore
from models.activity import ActivityLog, LogAuthor, LogType, Severity
from models.constants import FLAG_CONSTANTS
from models.variants import StoreVariant

__all__ = ('STORE_CLASSES', 'select_variant', 'create_store', 'convert')

STORE_CLASSES: Final[MappingProxyType[StoreVariant, type[FlagStore]]] = MappingProxyType(
    {
        StoreVariant.DENSE_BOUNDED : DenseBoundedStore,
        StoreVariant.DENSE_UNBOUNDED : DenseUnboundedStore,
        StoreVariant.SPARSE : SparseStore
    }
)

def select_variant(capacity: Optional[int] = None, expected_density: Optional[float] = None) -> StoreVariant:
    '''
    Pick a representation from what the caller knows about the flag space.

    A density hint below the sparse threshold always picks `SPARSE`. Otherwise an undeclared capacity picks
    `DENSE_UNBOUNDED`, and a declared one picks `DENSE_BOUNDED` unless it exceeds the bounded capacity limit.
    '''
    if capacity is not None and (isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 0):
        raise ValueError(f'Capacity must be a non-negative integer, got {capacity!r}')
    if expected_density is not None and not (0 <= expected_density <= 1):
        raise ValueError(f'Expected density must lie within [0, 1], got {expected_density}')

    if expected_density is not None and expected_density < FLAG_CONSTANTS.store.sparse_density_threshold:
        return StoreVariant.SPARSE
    if capacity is None or capacity > FLAG_CONSTANTS.store.bounded_capacity_limit:
        return StoreVariant.DENSE_UNBOUNDED
    return StoreVariant.DENSE_BOUNDED

def create_store(variant: Optional[StoreVariant] = None,
                 capacity: Optional[int] = None,
                 expected_density: Optional[float] = None,
                 word_width: Optional[int] = None) -> FlagStore:
    '''Create an empty store. An explicit `variant` takes precedence over the sizing hints'''
    if variant is None:
        variant = select_variant(capacity, expected_density)
    if variant is StoreVariant.DENSE_BOUNDED:
        return DenseBoundedStore(capacity, word_width)
    return STORE_CLASSES[variant]()

def _covering_capacity(store: FlagStore, word_width: int) -> int:
    highest: int = max(store, default=-1)
    return -(-(highest + 1) // word_width) * word_width

def convert(store: FlagStore,
            variant: StoreVariant,
            capacity: Optional[int] = None,
            word_width: Optional[int] = None,
            logger: Optional[Logger] = None) -> FlagStore:
    '''
    Rebuild `store` in another representation holding the same set flags.

    Converting into `DENSE_BOUNDED` without a capacity sizes the result to the smallest whole number of words
    covering the highest set flag. An explicit capacity too small for the set flags raises `OutOfRange`.
    '''
    if variant is StoreVariant.DENSE_BOUNDED:
        if word_width is None:
            word_width = store.word_width if isinstance(store, DenseBoundedStore) else FLAG_CONSTANTS.store.word_width
        converted: FlagStore = DenseBoundedStore(0 if capacity is None else capacity, word_width)
        if capacity is None:
            converted.resize(_covering_capacity(store, word_width))
    else:
        converted = STORE_CLASSES[variant]()

    try:
        for index in store:
            converted.set(index)
    except OutOfRange as out_of_range:
        if logger:
            logger.enqueue_log(ActivityLog(severity=Severity.ERROR.value,
                                           logged_by=LogAuthor.TIERING,
                                           log_category=LogType.STORAGE,
                                           log_details=f'Failed conversion {store.variant.value} -> {variant.value}: {out_of_range.description}'))
        raise

    if logger:
        logger.enqueue_log(ActivityLog(logged_by=LogAuthor.TIERING,
                                       log_category=LogType.STORAGE,
                                       log_details=f'Converted {len(store)} flag(s) {store.variant.value} -> {variant.value}'))
    return converted
