"""Supabase Storage client for photo blobs."""

from collections.abc import AsyncIterator
from dataclasses import dataclass
from urllib.parse import quote

import httpx

from family_photos.services.storage import BlobStore, ProgressCallback

DEFAULT_CHUNK_SIZE = 64 * 1024


@dataclass
class HttpxSupabaseStorage(BlobStore):
    """Blob store backed by the Supabase Storage REST API."""

    base_url: str
    service_key: str
    bucket: str
    signed_url_ttl_seconds: int
    http_client: httpx.AsyncClient
    chunk_size: int = DEFAULT_CHUNK_SIZE

    @classmethod
    def create(
        cls,
        base_url: str,
        service_key: str,
        bucket: str,
        signed_url_ttl_seconds: int,
    ) -> "HttpxSupabaseStorage":
        """Create a storage client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            service_key=service_key,
            bucket=bucket,
            signed_url_ttl_seconds=signed_url_ttl_seconds,
            http_client=httpx.AsyncClient(),
        )

    async def put(
        self,
        path: str,
        data: bytes,
        content_type: str,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        """Stream bytes to the bucket, reporting progress per chunk."""
        url = f"{self.base_url}/storage/v1/object/{self.bucket}/{_quote(path)}"
        headers = {
            **self._auth_headers(),
            "Content-Type": content_type,
            "Content-Length": str(len(data)),
            "x-upsert": "false",
        }
        response = await self.http_client.post(
            url,
            content=self._chunks(data, on_progress),
            headers=headers,
            timeout=60,
        )
        response.raise_for_status()

    async def resolve_url(self, path: str) -> str:
        """Create a signed download URL for a stored blob."""
        url = f"{self.base_url}/storage/v1/object/sign/{self.bucket}/{_quote(path)}"
        response = await self.http_client.post(
            url,
            json={"expiresIn": self.signed_url_ttl_seconds},
            headers=self._auth_headers(),
            timeout=10,
        )
        response.raise_for_status()
        payload = response.json()
        signed = payload.get("signedURL") or payload.get("signedUrl")
        if not signed:
            raise RuntimeError("Supabase Storage did not return a signed URL")
        return f"{self.base_url}/storage/v1{signed}"

    async def delete(self, path: str) -> None:
        """Delete a blob from the bucket."""
        url = f"{self.base_url}/storage/v1/object/{self.bucket}"
        response = await self.http_client.request(
            "DELETE",
            url,
            json={"prefixes": [path]},
            headers=self._auth_headers(),
            timeout=10,
        )
        response.raise_for_status()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    def _auth_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.service_key}",
            "apikey": self.service_key,
        }

    async def _chunks(
        self, data: bytes, on_progress: ProgressCallback | None
    ) -> AsyncIterator[bytes]:
        total = len(data)
        sent = 0
        for start in range(0, total, self.chunk_size):
            chunk = data[start : start + self.chunk_size]
            yield chunk
            sent += len(chunk)
            if on_progress is not None:
                on_progress(sent, total)
        if total == 0 and on_progress is not None:
            on_progress(0, 0)


def _quote(path: str) -> str:
    return quote(path, safe="/")
