import asyncio
import os
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from services.peerflix import PeerflixService
from utils.config import config
from utils.dispatcher import FetcherFactory, get_peerflix_streams
from utils.errors import (
    FetchError,
    InvalidConfigError,
    MissingCredentialError,
    TransportError,
)
from utils.logger import logger
from utils.models import PeerflixOptions, StreamRequest, UserConfig
from utils.url_processor import URLProcessor

router = APIRouter()

ENCRYPTION_KEY = os.getenv("ENCRYPTION_KEY")

url_processor = URLProcessor(ENCRYPTION_KEY.encode() if ENCRYPTION_KEY else None)


def get_fetcher_factory() -> FetcherFactory:
    return PeerflixService


def build_manifest(configured: bool) -> Dict:
    return {
        "id": "win.stkc.peerflix",
        "version": "1.0.0",
        "name": "Peerflix Multi",
        "description": "Peerflix streams for every configured debrid service",
        "catalogs": [],
        "resources": [
            {
                "name": "stream",
                "types": ["movie", "series"],
                "idPrefixes": ["tt"],
            }
        ],
        "types": ["movie", "series"],
        "behaviorHints": {
            "configurable": True,
            "configurationRequired": not configured,
        },
    }


def decode_user_config(config_path: str) -> UserConfig:
    try:
        return url_processor.decode_config(config_path)
    except InvalidConfigError as e:
        raise HTTPException(status_code=400, detail=str(e))


def error_stream(addon_name: str, error: Exception) -> Dict:
    return {
        "name": "Error",
        "title": f"❌ {addon_name}: {str(error)}",
        "url": "https://example.com/",
        "service": addon_name,
    }


async def _fetch_addon_streams(
    user_config: UserConfig,
    options: PeerflixOptions,
    stream_request: StreamRequest,
    addon_id: str,
    fetcher_factory: FetcherFactory,
) -> List[Dict]:
    try:
        return await get_peerflix_streams(
            user_config, options, stream_request, addon_id, fetcher_factory
        )
    except MissingCredentialError:
        raise
    except (TransportError, FetchError) as e:
        addon_name = options.override_name or config.get_addon_name("peerflix")
        logger.error(f"Error fetching streams from {addon_name} ({addon_id}): {str(e)}")
        return [error_stream(addon_name, e)]
    except Exception as e:
        addon_name = options.override_name or config.get_addon_name("peerflix")
        logger.error(
            f"Unexpected error fetching streams from {addon_name} ({addon_id}): {str(e)}",
            exc_info=True,
        )
        return [error_stream(addon_name, e)]


@router.get("/")
async def root():
    return RedirectResponse(url="/manifest.json")


@router.get("/manifest.json")
async def manifest():
    return build_manifest(configured=False)


@router.get("/{config_path}/manifest.json")
async def user_manifest(config_path: str):
    user_config = decode_user_config(config_path)
    enabled = [service.id for service in user_config.services if service.enabled]
    logger.info(f"Manifest request with services: {', '.join(enabled) or 'None'}")
    return build_manifest(configured=True)


@router.get("/{config_path}/stream/{content_type}/{meta_id}.json")
async def stream(
    config_path: str,
    content_type: str,
    meta_id: str,
    fetcher_factory: FetcherFactory = Depends(get_fetcher_factory),
):
    user_config = decode_user_config(config_path)
    stream_request = StreamRequest(type=content_type, id=meta_id)

    try:
        addons = [
            (f"peerflix-{index}", PeerflixOptions.model_validate(addon.options))
            for index, addon in enumerate(user_config.addons)
            if addon.id == "peerflix"
        ]
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"Invalid addon options: {str(e)}")
    if not addons:
        # A config without addon entries still gets a default Peerflix instance
        addons = [("peerflix-0", PeerflixOptions())]

    results = await asyncio.gather(
        *[
            _fetch_addon_streams(
                user_config, options, stream_request, addon_id, fetcher_factory
            )
            for addon_id, options in addons
        ],
        return_exceptions=True,
    )

    for result in results:
        if isinstance(result, MissingCredentialError):
            logger.warning(f"Rejected config for {meta_id}: {str(result)}")
            raise HTTPException(status_code=400, detail=str(result))
        if isinstance(result, BaseException):
            raise result

    streams = [item for addon_streams in results for item in addon_streams]
    logger.info(f"Returning {len(streams)} streams for {content_type}/{meta_id}")
    return {"streams": streams}
