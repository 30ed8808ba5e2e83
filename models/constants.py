from pathlib import Path
from typing import Annotated, Any, Final, Literal, Optional

import pytomlpp
from pydantic import BaseModel, Field, model_validator
from typing_extensions import Self

__all__ = ('StoreConstants',
           'SerializationConstants',
           'PermissionConstants',
           'LoggingConstants',
           'FlagConstants',
           'CONSTANTS_FILEPATH',
           'load_constants',
           'FLAG_CONSTANTS')

CONSTANTS_FILEPATH: Final[Path] = Path(__file__).parent.joinpath('constants.toml')

class StoreConstants(BaseModel):
    word_width: Annotated[int, Field(frozen=True, ge=8, le=1024)]
    default_capacity: Annotated[int, Field(frozen=True, ge=0)]
    sparse_density_threshold: Annotated[float, Field(frozen=True, ge=0, le=1)]
    bounded_capacity_limit: Annotated[int, Field(frozen=True, ge=1)]

    @model_validator(mode='after')
    def validate_capacities(self) -> Self:
        if self.default_capacity > self.bounded_capacity_limit:
            raise ValueError(f'Default capacity {self.default_capacity} must not exceed bounded capacity limit {self.bounded_capacity_limit}')
        return self

class SerializationConstants(BaseModel):
    default_text_base: Annotated[Literal[10, 16], Field(frozen=True)]
    max_payload_bytesize: Annotated[int, Field(frozen=True, ge=64)]
    max_payload_capacity: Annotated[int, Field(frozen=True, ge=64)]

class PermissionConstants(BaseModel):
    permission_word_width: Annotated[int, Field(frozen=True, ge=8, le=1024)]

class LoggingConstants(BaseModel):
    log_batch_size: Annotated[int, Field(ge=1)]
    log_max_retries: Annotated[int, Field(ge=1)]
    log_retry_delay: Annotated[float, Field(ge=0)]

class FlagConstants(BaseModel):
    store: StoreConstants
    serialization: SerializationConstants
    permissions: PermissionConstants
    logging: LoggingConstants

def load_constants(filepath: Optional[Path] = None) -> FlagConstants:
    loaded_constants: dict[str, Any] = pytomlpp.load(filepath or CONSTANTS_FILEPATH)
    return FlagConstants.model_validate({'store' : StoreConstants.model_validate(loaded_constants['store']),
                                         'serialization' : SerializationConstants.model_validate(loaded_constants['serialization']),
                                         'permissions' : PermissionConstants.model_validate(loaded_constants['permissions']),
                                         'logging' : LoggingConstants.model_validate(loaded_constants['logging'])})

FLAG_CONSTANTS: Final[FlagConstants] = load_constants()
