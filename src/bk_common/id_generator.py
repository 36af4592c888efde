"""Snowflake-style ID generator for ledger transaction IDs.

IDs are decimal strings that increase with generation time, so sorting
transactions by id agrees with sorting them by creation order within a
single process.
"""

import os
import threading
import time

from config.settings import settings


class SnowflakeIdGenerator:
    """Layout (63 bits used):

      - 41 bits: millisecond timestamp since ``EPOCH_MS``
      - 10 bits: worker_id (0-1023)
      - 12 bits: sequence (0-4095 per millisecond)
    """

    EPOCH_MS = 1_704_067_200_000  # 2024-01-01T00:00:00Z
    _WORKER_BITS = 10
    _SEQUENCE_BITS = 12
    _MAX_SEQUENCE = (1 << _SEQUENCE_BITS) - 1

    def __init__(self, worker_id: int = 0) -> None:
        if not (0 <= worker_id < (1 << self._WORKER_BITS)):
            raise ValueError(f"worker_id must be 0-{(1 << self._WORKER_BITS) - 1}")
        self._worker_id = worker_id
        self._sequence = 0
        self._last_ms = -1
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            now_ms = self._clock_ms()
            if now_ms < self._last_ms:
                # Clock stepped backwards: keep issuing from the last seen ms
                now_ms = self._last_ms
            if now_ms == self._last_ms:
                self._sequence = (self._sequence + 1) & self._MAX_SEQUENCE
                if self._sequence == 0:
                    now_ms = self._wait_after(now_ms)
            else:
                self._sequence = 0

            self._last_ms = now_ms
            value = (
                ((now_ms - self.EPOCH_MS) << (self._WORKER_BITS + self._SEQUENCE_BITS))
                | (self._worker_id << self._SEQUENCE_BITS)
                | self._sequence
            )
            return str(value)

    def _clock_ms(self) -> int:
        return time.time_ns() // 1_000_000

    def _wait_after(self, last_ms: int) -> int:
        now_ms = self._clock_ms()
        while now_ms <= last_ms:
            now_ms = self._clock_ms()
        return now_ms


def default_worker_id() -> int:
    """WORKER_ID when configured, otherwise the process id folded into 10 bits."""
    if settings.WORKER_ID is not None:
        return settings.WORKER_ID
    return os.getpid() % (1 << SnowflakeIdGenerator._WORKER_BITS)


_default_generator = SnowflakeIdGenerator(worker_id=default_worker_id())


def generate_transaction_id() -> str:
    """Next transaction id from the process-wide generator."""
    return _default_generator.next_id()
