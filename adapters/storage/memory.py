"""
In-memory key-value storage.

Used by tests and the demo. `fail_reads` / `fail_writes` simulate a flaky
device store so the stores' failure handling can be exercised.
"""

import asyncio

from healthtwin.log import logger
from healthtwin.services.storage import StorageError


class InMemoryStorage:
    """Dict-backed implementation of the KeyValueStorage protocol."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self.fail_reads = False
        self.fail_writes = False
        self.write_count = 0
        self.logger = logger.bind(component="in_memory_storage")

    async def get(self, key: str) -> str | None:
        await asyncio.sleep(0)
        if self.fail_reads:
            raise StorageError(key, "simulated read failure")
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.sleep(0)
        if self.fail_writes:
            raise StorageError(key, "simulated write failure")
        self._data[key] = value
        self.write_count += 1
        self.logger.debug("storage_key_written", key=key, size=len(value))

    def keys(self) -> list[str]:
        return sorted(self._data)
