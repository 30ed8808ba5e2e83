'''Tiered boolean flag storage'''
from flagstore.base import FlagStore
from flagstore.dense_bounded import DenseBoundedStore
from flagstore.dense_unbounded import DenseUnboundedStore
from flagstore.errors import FlagStoreException, OutOfRange, InvalidFlagIndex, MalformedPayload, UnknownPermission
from flagstore.sparse import SparseStore
from flagstore.tiering import select_variant, create_store, convert
from flagstore.permission_field import PermissionField
from models.variants import StoreVariant

__all__ = ('FlagStore',
           'DenseBoundedStore',
           'DenseUnboundedStore',
           'SparseStore',
           'StoreVariant',
           'select_variant',
           'create_store',
           'convert',
           'PermissionField',
           'FlagStoreException',
           'OutOfRange',
           'InvalidFlagIndex',
           'MalformedPayload',
           'UnknownPermission')
