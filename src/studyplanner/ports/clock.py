"""Clock and identifier interface."""

from datetime import date
from typing import Protocol


class Clock(Protocol):
    """Interface for the current date, creation instants and fresh ids."""

    def today(self) -> date:
        """Current calendar date."""
        ...

    def now(self) -> int:
        """Current instant in epoch milliseconds, distinct per call."""
        ...

    def new_id(self) -> str:
        """Identifier unique for the lifetime of the process."""
        ...
