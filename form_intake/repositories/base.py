"""
Persistence gateway interface shared by the form and CSV paths.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any


class RowStore(ABC):
    """
    Destination table for validated rows.
    """

    @abstractmethod
    async def ensure_table(self) -> None:
        """
        Create the destination table if it does not exist. Idempotent.
        """

    @abstractmethod
    async def insert_row(self, row: Mapping[str, Any]) -> int:
        """
        Persist one row and return its generated id.
        """

    @abstractmethod
    async def insert_many(self, rows: Sequence[Mapping[str, Any]]) -> int:
        """
        Persist all rows atomically and return the inserted row count.
        """
