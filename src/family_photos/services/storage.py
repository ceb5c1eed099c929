"""Blob storage interface."""

from collections.abc import Callable
from typing import Protocol

ProgressCallback = Callable[[int, int], None]
"""Receives (bytes_sent, total_bytes) while a blob is written."""


class BlobStore(Protocol):
    """Interface for photo byte storage."""

    async def put(
        self,
        path: str,
        data: bytes,
        content_type: str,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        """Write bytes at a path, reporting progress as chunks are sent."""

    async def resolve_url(self, path: str) -> str:
        """Return a retrievable URL for a stored blob."""

    async def delete(self, path: str) -> None:
        """Delete a stored blob."""
