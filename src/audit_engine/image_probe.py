"""
Image size probing.

Fetches every discovered image out-of-band with httpx, so the rendered page
under audit is never navigated away from.
"""

import asyncio
import base64
import logging
from urllib.parse import unquote_to_bytes

import httpx

from .models import FILE_SIZE_UNAVAILABLE, ImageRecord

logger = logging.getLogger(__name__)


class ImageSizeProbe:
    """
    Measures the byte size of image resources.

    Probes run concurrently; failures yield FILE_SIZE_UNAVAILABLE instead of raising.
    """

    def __init__(
        self,
        user_agent: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the probe.

        Args:
            user_agent: User-Agent header sent with each request (optional)
            timeout: Per-request timeout in seconds
            transport: Custom httpx transport (optional, used by tests)
        """
        self.user_agent = user_agent
        self.timeout = timeout
        self.transport = transport

    async def probe_all(self, images: list[ImageRecord]) -> list[ImageRecord]:
        """
        Fill in file_size for every image.

        Args:
            images: Images in DOM discovery order

        Returns:
            The same records, in the same order, with file_size set
        """
        if not images:
            return images

        headers = {"User-Agent": self.user_agent} if self.user_agent else {}

        async with httpx.AsyncClient(
            follow_redirects=True,
            timeout=self.timeout,
            headers=headers,
            transport=self.transport,
        ) as client:
            sizes = await asyncio.gather(*(self._probe(client, image.src) for image in images))

        for image, size in zip(images, sizes):
            image.file_size = size

        return images

    async def _probe(self, client: httpx.AsyncClient, src: str) -> int | str:
        if not src:
            return FILE_SIZE_UNAVAILABLE

        if src.startswith("data:"):
            return self._data_uri_size(src)

        if not src.startswith(("http://", "https://")):
            return FILE_SIZE_UNAVAILABLE

        try:
            response = await client.get(src)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Could not fetch image %s: %s", src, e)
            return FILE_SIZE_UNAVAILABLE

        return len(response.content)

    def _data_uri_size(self, src: str) -> int | str:
        header, sep, data = src.partition(",")
        if not sep:
            return FILE_SIZE_UNAVAILABLE

        try:
            if header.endswith(";base64"):
                return len(base64.b64decode(data, validate=False))
            return len(unquote_to_bytes(data))
        except ValueError:
            return FILE_SIZE_UNAVAILABLE
