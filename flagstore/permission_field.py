'''Named permissions packed into a single bounded word'''
from typing import Iterable, Iterator, Optional

from flagstore.dense_bounded import DenseBoundedStore
from flagstore.errors import UnknownPermission
from flagstore.logging import Logger
from flagstore.serialization import from_integer, parse_field, to_integer
from flagstore.typing import ColumnValue, PermissionLike
from models.activity import ActivityLog, LogAuthor, LogType
from models.constants import FLAG_CONSTANTS
from models.flags import PERMISSION_BITS_CHECK, PERMISSION_NAME_MAPPING, PermissionBit
from models.permissions import ROLE_MAPPING, RoleTypes
from models.variants import StoreVariant

__all__ = ('resolve_permission', 'PermissionField')

def resolve_permission(permission: PermissionLike) -> PermissionBit:
    if isinstance(permission, PermissionBit):
        return permission
    if isinstance(permission, str):
        try:
            return PERMISSION_NAME_MAPPING[permission.strip().lower()]
        except KeyError:
            pass
    raise UnknownPermission(f'Unrecognised permission: {permission!r}')

class PermissionField:
    '''
    A closed set of named permissions held in one word of a `DenseBoundedStore`, suitable for an integer column.

    `subject` names whoever the field belongs to and only appears in activity logs.
    '''
    __slots__ = ('_store', 'subject', 'logger')

    def __init__(self,
                 permissions: Iterable[PermissionLike] = (),
                 subject: Optional[str] = None,
                 logger: Optional[Logger] = None):
        self._store: DenseBoundedStore = DenseBoundedStore(FLAG_CONSTANTS.permissions.permission_word_width,
                                                           FLAG_CONSTANTS.permissions.permission_word_width)
        self.subject: Optional[str] = subject
        self.logger: Optional[Logger] = logger
        for permission in permissions:
            self._store.set(resolve_permission(permission).value)

    @classmethod
    def from_roles(cls, *roles: RoleTypes, subject: Optional[str] = None, logger: Optional[Logger] = None) -> 'PermissionField':
        permissions: set[PermissionBit] = set()
        for role in roles:
            permissions.update(ROLE_MAPPING[RoleTypes(role)])
        return cls(permissions, subject=subject, logger=logger)

    @classmethod
    def from_column(cls, value: ColumnValue, subject: Optional[str] = None, logger: Optional[Logger] = None) -> 'PermissionField':
        '''Load a field from its stored integer, or the decimal/hex text of one'''
        bits: int = parse_field(value)
        if bits & ~PERMISSION_BITS_CHECK:
            raise UnknownPermission(f'Unrecognised permission bits in column value: {hex(bits & ~PERMISSION_BITS_CHECK)}')

        width: int = FLAG_CONSTANTS.permissions.permission_word_width
        store = from_integer(bits, StoreVariant.DENSE_BOUNDED, width, width)
        field = cls(subject=subject, logger=logger)
        field._store = store
        return field

    def to_column(self) -> int:
        return to_integer(self._store)

    def _record(self, action: str, permission: PermissionBit) -> None:
        if not self.logger:
            return
        self.logger.enqueue_log(ActivityLog(logged_by=LogAuthor.PERMISSION_FIELD,
                                            log_category=LogType.PERMISSION,
                                            log_details=f'{action} {permission.name.lower()}',
                                            subject_concerned=self.subject))

    def grant(self, *permissions: PermissionLike) -> None:
        for permission in map(resolve_permission, permissions):
            if not self._store.test(permission.value):
                self._store.set(permission.value)
                self._record('Granted', permission)

    def revoke(self, *permissions: PermissionLike) -> None:
        for permission in map(resolve_permission, permissions):
            if self._store.test(permission.value):
                self._store.clear(permission.value)
                self._record('Revoked', permission)

    def toggle(self, permission: PermissionLike) -> bool:
        permission = resolve_permission(permission)
        state: bool = self._store.toggle(permission.value)
        self._record('Granted' if state else 'Revoked', permission)
        return state

    def has(self, permission: PermissionLike) -> bool:
        return self._store.test(resolve_permission(permission).value)

    def has_all(self, *permissions: PermissionLike) -> bool:
        return all(self.has(permission) for permission in permissions)

    def has_any(self, *permissions: PermissionLike) -> bool:
        return any(self.has(permission) for permission in permissions)

    def permissions(self) -> frozenset[PermissionBit]:
        return frozenset(PermissionBit(index) for index in self._store)

    def __iter__(self) -> Iterator[PermissionBit]:
        return (PermissionBit(index) for index in self._store)

    def __contains__(self, permission: object) -> bool:
        if not isinstance(permission, (PermissionBit, str)):
            return False
        try:
            return self.has(permission)
        except UnknownPermission:
            return False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PermissionField):
            return NotImplemented
        return self._store == other._store

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({sorted(permission.name.lower() for permission in self)})'
