"""Errors and cancellation shared by the export operations."""
from __future__ import annotations

import threading


class BannerKitError(Exception):
    pass


class ExportError(BannerKitError):
    """A generation request that cannot produce output; the message is user-facing."""


class ExportCancelled(BannerKitError):
    pass


class CancellationToken:
    """Set by a caller to stop a long multi-frame or multi-banner pass between steps."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, what: str = "export") -> None:
        if self._event.is_set():
            raise ExportCancelled(f"{what} cancelled")
