"""Result/error union for reads whose failure has a sensible default."""

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ReadResult(Generic[T]):
    value: Optional[T] = None
    error: Optional[Exception] = None
    label: str = "read"

    @property
    def ok(self) -> bool:
        return self.error is None

    def or_default(self, default: T) -> T:
        """Return the value, or ``default`` (logged) when the read failed."""
        if self.error is None:
            return self.value
        logger.warning("⚠️ %s failed (%s); using default %r", self.label, self.error, default)
        return default


def try_read(read: Callable[[], T], label: str = "read") -> ReadResult[T]:
    """Run ``read`` and capture either its value or the exception it raised."""
    try:
        return ReadResult(value=read(), label=label)
    except Exception as e:
        return ReadResult(error=e, label=label)
