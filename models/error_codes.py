from enum import Enum

class StoreErrorFlags(Enum):
    # Index space
    OUT_OF_RANGE = "2:range"
    INVALID_INDEX = "2:index"

    # Serialization
    MALFORMED_PAYLOAD = "2:payload"

    # Permissions
    UNKNOWN_PERMISSION = "2:perm"
