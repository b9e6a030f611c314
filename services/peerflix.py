import os
from typing import Dict, List, Optional

import httpx

from utils.config import config
from utils.errors import IndexerTimeoutError, TransportError
from utils.logger import logger
from utils.models import StreamRequest, UserConfig

from .base import StreamingService


class PeerflixService(StreamingService):
    def __init__(
        self,
        config_string: Optional[str],
        override_url: Optional[str],
        addon_name: Optional[str],
        addon_id: str,
        user_config: UserConfig,
        indexer_timeout: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if override_url:
            self.base_url = override_url
        else:
            self.base_url = config.peerflix_url + (f"{config_string}/" if config_string else "")
        self.base_url = self._strip_manifest(self.base_url)
        self.addon_name = addon_name or config.get_addon_name("peerflix")
        self.addon_id = addon_id
        self.user_config = user_config
        self.indexer_timeout = indexer_timeout or config.default_peerflix_timeout

        proxy_url = os.getenv("ADDON_PROXY")
        if transport is None and proxy_url:
            transport = httpx.AsyncHTTPTransport(proxy=proxy_url)
        self.transport = transport

    @property
    def name(self) -> str:
        return self.addon_name

    @staticmethod
    def _strip_manifest(url: str) -> str:
        if url.endswith("manifest.json"):
            url = url[: -len("manifest.json")]
        return url if url.endswith("/") else f"{url}/"

    async def _fetch_from_peerflix(self, url: str) -> Dict:
        async with httpx.AsyncClient(
            transport=self.transport, timeout=self.indexer_timeout / 1000
        ) as client:
            try:
                response = await client.get(url)
                response.raise_for_status()
                data = response.json()
                logger.debug(f"{self.name} response: {data}")
                return data
            except httpx.TimeoutException as e:
                logger.error(f"{self.name} request timed out after {self.indexer_timeout}ms")
                raise IndexerTimeoutError(
                    f"{self.name} timed out after {self.indexer_timeout}ms"
                ) from e
            except httpx.HTTPError as e:
                logger.error(f"{self.name} request failed: {str(e)}")
                raise TransportError(f"{self.name} request failed: {str(e)}") from e
            except ValueError as e:
                logger.error(f"{self.name} returned invalid JSON: {str(e)}")
                raise TransportError(f"{self.name} returned invalid JSON") from e

    async def get_parsed_streams(self, stream_request: StreamRequest) -> List[Dict]:
        url = f"{self.base_url}stream/{stream_request.type}/{stream_request.id}.json"
        logger.debug(f"{self.name} stream url: {url}")
        data = await self._fetch_from_peerflix(url)
        if not isinstance(data, dict):
            logger.error(f"{self.name} returned an unexpected payload: {data!r}")
            raise TransportError(f"{self.name} returned an unexpected payload")

        streams = data.get("streams") or []
        if not isinstance(streams, list):
            logger.error(f"{self.name} returned malformed streams: {streams!r}")
            raise TransportError(f"{self.name} returned malformed streams")

        streams = [stream for stream in streams if isinstance(stream, dict)]
        for stream in streams:
            stream["service"] = self.name
            stream["addon_id"] = self.addon_id

            # Torrent links only carry an info hash, debrid links carry a url
            stream["is_p2p"] = "infoHash" in stream and "url" not in stream
            stream["is_cached"] = not stream["is_p2p"]

        return streams
