"""Cooperative cancellation handle for batch processing."""

from __future__ import annotations

from pricescan.domain.errors import CancellationRequested


class CancellationToken:
    """Flag checked between images and between enhancement variants."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def raise_if_cancelled(self, message: str = "Processing cancelled") -> None:
        if self._cancelled:
            raise CancellationRequested(message)
