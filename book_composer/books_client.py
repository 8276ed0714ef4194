# book_composer/books_client.py
"""
Client for the remote books API.

Only one call is needed by the composer: creating a book recommendation
with a multipart POST to /books.
"""
import asyncio
import logging
from pathlib import Path
from typing import Any, Optional
from urllib.parse import unquote, urlparse

import httpx

from book_composer.draft import SelectedImage
from book_composer.perf import Stopwatch

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Something went wrong"


class BooksApiError(Exception):
    """The books API refused a request or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def read_local_image(uri: str) -> bytes:
    """Loads the bytes behind a file:// URI (or a bare path)."""
    parsed = urlparse(uri)
    if parsed.scheme not in ("", "file"):
        raise ValueError(f"Not a local image: {uri}")
    return Path(unquote(parsed.path)).read_bytes()


class BooksApiClient:
    """Thin httpx wrapper with automatic timing of every call"""

    def __init__(
        self,
        base_url: str,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ):
        self.base_url: str = base_url.rstrip("/")
        self.transport = transport
        # None keeps httpx's default timeout
        self.timeout = timeout
        self.logger: logging.Logger = logging.getLogger(__name__)

    def _client(self) -> httpx.AsyncClient:
        kwargs: dict[str, Any] = {"base_url": self.base_url}
        if self.transport is not None:
            kwargs["transport"] = self.transport
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        return httpx.AsyncClient(**kwargs)

    async def _timed_post(self, path: str, **kwargs) -> httpx.Response:
        watch = Stopwatch()
        self.logger.info(f"Books API call: POST {path}")
        try:
            async with self._client() as client:
                response = await client.post(path, **kwargs)
        except httpx.HTTPError as e:
            self.logger.error(
                f"Books API failed: POST {path} after {watch.elapsed}s - {str(e)}"
            )
            raise BooksApiError(str(e) or GENERIC_ERROR) from e

        self.logger.info(
            f"Books API completed: POST {path} "
            f"Status: {response.status_code} in {watch.elapsed}s"
        )
        return response

    async def create_book(
        self,
        token: str | None,
        title: str,
        caption: str,
        rating: int,
        image: SelectedImage,
    ) -> dict:
        """
        Posts a recommendation and returns the decoded JSON body.

        Raises BooksApiError for transport failures, non-2xx responses and
        bodies that are not JSON. The error text is, in order:

        - the server's "message" field, converted to a string, for a non-2xx
          response that sends one;
        - httpx's own text for a transport failure, e.g. "All connection
          attempts failed", so the user sees why nothing reached the server;
        - "Something went wrong" otherwise.
        """
        content = await asyncio.to_thread(read_local_image, image.local_uri)
        response = await self._timed_post(
            "/books",
            headers={"Authorization": f"Bearer {token or ''}"},
            data={"title": title, "caption": caption, "rating": str(rating)},
            files={"image": (image.file_name, content, image.mime_type)},
        )

        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.is_success:
            message = data.get("message") if isinstance(data, dict) else None
            # Servers sometimes send codes or lists here
            if message is not None and message != "":
                message = str(message)
            raise BooksApiError(message or GENERIC_ERROR, response.status_code)
        if data is None:
            raise BooksApiError(GENERIC_ERROR, response.status_code)
        return data
