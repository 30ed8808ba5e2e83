from pydantic import BaseModel, Field
from typing import Annotated, Optional
from datetime import datetime
from enum import Enum, IntFlag

__all__ = ('Severity', 'LogType', 'LogAuthor', 'ActivityLog')

class Severity(IntFlag):
    INFO                    = 1
    TRACE                   = 2
    ERROR                   = 3
    NON_CRITICAL_FAILURE    = 4
    CRITICAL_FAILURE        = 5

class LogType(Enum):
    STORAGE             = 'storage'
    SERIALIZATION       = 'serialization'
    PERMISSION          = 'permission'
    AUDIT               = 'audit'
    INTERNAL            = 'internal'
    UNKNOWN             = 'unknown'

class LogAuthor(Enum):
    TIERING             = 'tiering'
    PERMISSION_FIELD    = 'permission_field'
    LOGGER              = 'logger'
    EXCEPTION_FALLBACK  = 'exception_fallback'


class ActivityLog(BaseModel):
    '''Single activity record, written to the log sink as one orjson line'''
    occurance_time: Annotated[datetime, Field(frozen=True, default_factory=datetime.now)]
    severity: Annotated[int, Field(le=5, ge=1, default=Severity.INFO.value)]
    logged_by: Annotated[LogAuthor, Field(default=LogAuthor.LOGGER)]
    log_category: Annotated[LogType, Field(default=LogType.UNKNOWN)]
    log_details: Annotated[Optional[str], Field(max_length=512, default=None)]
    subject_concerned: Annotated[Optional[str], Field(max_length=128, default=None)]
