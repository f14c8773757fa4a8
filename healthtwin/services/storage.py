"""
Local key-value persistence contract shared by all health twin stores.

Key patterns:
- Protocol-based dependency injection (any async get/set backend works)
- Explicit Result values for expected I/O failures
- One stable storage key per logical collection
"""

from typing import Generic, Protocol, TypeVar

from pydantic import TypeAdapter, ValidationError

from healthtwin.log import logger

ValueT = TypeVar("ValueT")
ErrorT = TypeVar("ErrorT", bound=BaseException)
ModelT = TypeVar("ModelT")


class HealthTwinError(Exception):
    """Base class for health twin errors."""


class StorageError(HealthTwinError):
    """A storage backend failed to read or write a key."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(f"{key}: {message}")
        self.key = key


class InvalidStorageKeyError(HealthTwinError, ValueError):
    """Storage key contains characters a backend cannot address."""


class CorruptedPayloadError(HealthTwinError):
    """Persisted payload could not be decoded into the expected shape."""

    def __init__(self, key: str, cause: Exception) -> None:
        super().__init__(f"Corrupted payload under {key!r}: {cause}")
        self.key = key
        self.cause = cause


class Result(Generic[ValueT, ErrorT]):
    """
    Explicit error handling without exceptions for expected failures.

    Unlike a bare Optional, `Result.ok(None)` is a valid success ("key not found"),
    which keeps "no data yet" distinct from "storage is broken".
    """

    __slots__ = ("_value", "_error", "_ok")

    def __init__(self, value: ValueT | None, error: ErrorT | None, ok: bool) -> None:
        if ok and error is not None:
            raise ValueError("Result cannot have both value and error")
        if not ok and error is None:
            raise ValueError("Err result must carry an error")
        self._value = value
        self._error = error
        self._ok = ok

    @classmethod
    def ok(cls, value: ValueT) -> "Result[ValueT, ErrorT]":
        return cls(value, None, True)

    @classmethod
    def err(cls, error: ErrorT) -> "Result[ValueT, ErrorT]":
        return cls(None, error, False)

    def is_ok(self) -> bool:
        return self._ok

    def is_err(self) -> bool:
        return not self._ok

    def unwrap(self) -> ValueT:
        if not self._ok:
            raise self._error  # type: ignore[misc]
        return self._value  # type: ignore[return-value]

    def unwrap_or(self, default: ValueT) -> ValueT:
        return self._value if self._ok else default  # type: ignore[return-value]

    def unwrap_err(self) -> ErrorT:
        if self._ok:
            raise ValueError("Called unwrap_err() on an Ok value")
        return self._error  # type: ignore[return-value]


class KeyValueStorage(Protocol):
    """
    Asynchronous, string-only durable storage.

    Callers JSON-encode their own structured data. Backends raise StorageError
    on I/O failure and return None for keys that were never written.
    """

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...


class PersistentStore:
    """
    Base for stores that mirror one in-memory collection under one storage key.

    Reads and writes never raise: failures come back as Result errors and are
    logged here, so every store shares the same failure policy.
    """

    def __init__(self, storage: KeyValueStorage, key: str, component: str) -> None:
        self.storage = storage
        self.key = key
        self.logger = logger.bind(component=component, storage_key=key)

    async def _read(self, adapter: TypeAdapter[ModelT]) -> Result[ModelT | None, Exception]:
        try:
            raw = await self.storage.get(self.key)
        except Exception as e:
            self.logger.error("storage_read_failed", error=str(e), error_type=type(e).__name__)
            return Result.err(e)

        if raw is None:
            return Result.ok(None)

        try:
            return Result.ok(adapter.validate_json(raw))
        except ValidationError as e:
            self.logger.warning("storage_payload_corrupted", error_count=e.error_count())
            return Result.err(CorruptedPayloadError(self.key, e))

    async def _write(self, adapter: TypeAdapter[ModelT], value: ModelT) -> Result[int, Exception]:
        payload = adapter.dump_json(value, by_alias=True, exclude_none=True).decode("utf-8")
        try:
            await self.storage.set(self.key, payload)
        except Exception as e:
            self.logger.error("storage_write_failed", error=str(e), error_type=type(e).__name__)
            return Result.err(e)
        return Result.ok(len(payload))
