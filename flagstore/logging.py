import time
import warnings
from collections import deque
from traceback import format_exception_only
from typing import Final, Optional, Sequence

import orjson

from flagstore.typing import LogSink
from models.activity import ActivityLog, LogAuthor, LogType, Severity
from models.constants import FLAG_CONSTANTS

__all__ = ('RECOVERABLE_ERRORS', 'Logger')

RECOVERABLE_ERRORS: Final[tuple[type[Exception], ...]] = (BlockingIOError,
                                                          InterruptedError,
                                                          TimeoutError)

class Logger:
    '''
    Batches `ActivityLog` records and writes them to a binary sink as orjson lines.

    A batch is written once `batch_size` records are queued, or on an explicit `flush_logs()`.
    Recoverable write errors are retried up to `max_retries` times, after which the batch is dropped.
    '''
    __slots__ = ('_log_queue', '_sink',
                 '_batch_size', '_max_retries', '_retry_delay')

    def __init__(self,
                 sink: LogSink,
                 batch_size: Optional[int] = None,
                 max_retries: Optional[int] = None,
                 retry_delay: Optional[float] = None):
        self._sink: Final[LogSink] = sink
        self._log_queue: Final[deque[ActivityLog]] = deque()

        self.batch_size = FLAG_CONSTANTS.logging.log_batch_size if batch_size is None else batch_size
        self.max_retries = FLAG_CONSTANTS.logging.log_max_retries if max_retries is None else max_retries
        self.retry_delay = FLAG_CONSTANTS.logging.log_retry_delay if retry_delay is None else retry_delay

    @property
    def batch_size(self) -> int:
        return self._batch_size
    @batch_size.setter
    def batch_size(self, value: int) -> None:
        if not isinstance(value, int) or (value <= 0):
            raise ValueError("Batch size must be a positive integer")
        self._batch_size = value

    @property
    def max_retries(self) -> int:
        return self._max_retries
    @max_retries.setter
    def max_retries(self, value: int) -> None:
        if not isinstance(value, int) or (value <= 0):
            raise ValueError("Max retries for failed logs must be a positive integer")
        self._max_retries = value

    @property
    def retry_delay(self) -> float:
        return self._retry_delay
    @retry_delay.setter
    def retry_delay(self, value: float) -> None:
        if not isinstance(value, (float, int)) or (value < 0):
            raise ValueError("Retry delay must be a non-negative number of seconds")
        self._retry_delay = value

    @property
    def pending(self) -> int:
        return len(self._log_queue)

    def enqueue_log(self, log: ActivityLog) -> None:
        self._log_queue.append(log)
        if len(self._log_queue) >= self.batch_size:
            self.flush_logs()

    def _flush_batch(self, batch: Sequence[ActivityLog]) -> None:
        self._sink.write(b''.join(orjson.dumps(log_entry.model_dump()) + b'\n' for log_entry in batch))

    def _emit_meta_log(self, error: OSError, dropped: int) -> None:
        meta_log = ActivityLog(severity=Severity.CRITICAL_FAILURE.value,
                               logged_by=LogAuthor.EXCEPTION_FALLBACK,
                               log_category=LogType.INTERNAL,
                               log_details=f'Dropped {dropped} activity log(s): ' + ''.join(format_exception_only(error)).strip())
        try:
            self._flush_batch((meta_log,))
        except OSError:
            warnings.warn(f'[Logging] {meta_log.log_details}', ResourceWarning)

    def _flush_with_retries(self, batch: list[ActivityLog]) -> bool:
        for _ in range(self.max_retries):
            try:
                self._flush_batch(batch)
                batch.clear()
                return True
            except RECOVERABLE_ERRORS:
                time.sleep(self.retry_delay)
                continue
            except OSError as os_error:
                self._emit_meta_log(os_error, len(batch))
                batch.clear()
                return False

        # retries exhausted, drop intentionally
        warnings.warn(f'[Logging] Dropped {len(batch)} activity log(s) after {self.max_retries} failed write(s)', ResourceWarning)
        batch.clear()
        return False

    def flush_logs(self) -> bool:
        log_entries: list[ActivityLog] = list(self._log_queue)
        self._log_queue.clear()
        if not log_entries:
            return True
        return self._flush_with_retries(log_entries)

    def __enter__(self) -> 'Logger':
        return self

    def __exit__(self, *exc_info) -> None:
        self.flush_logs()
