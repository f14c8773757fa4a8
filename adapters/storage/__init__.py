"""Key-value storage backends for the health twin stores."""

from .json_file import JsonFileStorage
from .memory import InMemoryStorage

__all__ = ["InMemoryStorage", "JsonFileStorage"]
