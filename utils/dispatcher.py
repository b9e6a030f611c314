import asyncio
from typing import Callable, Dict, List, Optional

from services.base import StreamingService
from services.peerflix import PeerflixService
from utils.config import config
from utils.credentials import P2P_PAIR, get_service_pair, render_config_string
from utils.errors import FetchError
from utils.logger import logger
from utils.models import (
    DispatchOptions,
    PeerflixOptions,
    Service,
    StreamRequest,
    UserConfig,
)
from utils.service_selector import select_services

# (config_string, override_url, addon_name, addon_id, user_config, timeout)
FetcherFactory = Callable[..., StreamingService]


class StreamDispatcher:
    def __init__(self, fetcher_factory: FetcherFactory):
        self.fetcher_factory = fetcher_factory

    def _create_fetcher(
        self,
        options: DispatchOptions,
        addon_id: str,
        user_config: UserConfig,
        config_string: Optional[str] = None,
        override_url: Optional[str] = None,
    ) -> StreamingService:
        return self.fetcher_factory(
            config_string,
            override_url,
            options.override_name,
            addon_id,
            user_config,
            options.timeout,
        )

    async def dispatch(
        self,
        options: DispatchOptions,
        services: List[Service],
        stream_request: StreamRequest,
        addon_id: str,
        user_config: UserConfig,
    ) -> List[Dict]:
        """Fetch streams for the selected services.

        An override url bypasses every other option. Without services a single
        unconfigured request is made. Otherwise the services either share one
        instance or each get their own, depending on use_multiple_instances.
        """
        if options.override_url:
            fetcher = self._create_fetcher(
                options, addon_id, user_config, override_url=options.override_url
            )
            return await fetcher.get_parsed_streams(stream_request)

        if not services:
            logger.warning(
                f"No usable services for {addon_id}, requesting without configuration"
            )
            fetcher = self._create_fetcher(options, addon_id, user_config)
            return await fetcher.get_parsed_streams(stream_request)

        if options.use_multiple_instances:
            return await self._fetch_multiple_instances(
                options, services, stream_request, addon_id, user_config
            )

        pairs = [get_service_pair(service.id, service.credentials) for service in services]
        if options.show_p2p_streams:
            pairs.append(P2P_PAIR)
        fetcher = self._create_fetcher(
            options, addon_id, user_config, config_string=render_config_string(pairs)
        )
        return await fetcher.get_parsed_streams(stream_request)

    async def _fetch_multiple_instances(
        self,
        options: DispatchOptions,
        services: List[Service],
        stream_request: StreamRequest,
        addon_id: str,
        user_config: UserConfig,
    ) -> List[Dict]:
        # P2P streams are requested from the first instance only
        config_strings = []
        for index, service in enumerate(services):
            pairs = [get_service_pair(service.id, service.credentials)]
            if options.show_p2p_streams and index == 0:
                pairs.append(P2P_PAIR)
            config_strings.append(render_config_string(pairs))

        results = await asyncio.gather(
            *[
                self._fetch_instance(
                    service,
                    self._create_fetcher(
                        options, addon_id, user_config, config_string=config_string
                    ),
                    stream_request,
                )
                for service, config_string in zip(services, config_strings)
            ],
            return_exceptions=True,
        )

        streams = []
        errors = []
        for result in results:
            if isinstance(result, BaseException):
                errors.append(result)
            else:
                streams.extend(result)

        if len(errors) == len(results):
            raise FetchError(errors)
        return streams

    async def _fetch_instance(
        self, service: Service, fetcher: StreamingService, stream_request: StreamRequest
    ) -> List[Dict]:
        logger.debug(f"Creating {fetcher.name} instance with service: {service.id}")
        try:
            return await fetcher.get_parsed_streams(stream_request)
        except Exception as e:
            logger.error(f"Error fetching streams from {fetcher.name} ({service.id}): {str(e)}")
            raise


async def get_peerflix_streams(
    user_config: UserConfig,
    peerflix_options: PeerflixOptions,
    stream_request: StreamRequest,
    addon_id: str,
    fetcher_factory: FetcherFactory = PeerflixService,
) -> List[Dict]:
    options = peerflix_options.parse()
    services = select_services(
        user_config.services, config.get_supported_services("peerflix")
    )
    logger.debug(
        f"Found {len(services)} usable services: {', '.join(s.id for s in services)}"
    )
    return await StreamDispatcher(fetcher_factory).dispatch(
        options, services, stream_request, addon_id, user_config
    )
