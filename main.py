import asyncio
import logging
from contextlib import asynccontextmanager

import httpx
import uvicorn
from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from routes.api import ENCRYPTION_KEY, router
from utils.config import config
from utils.logger import logger

logging.getLogger("httpx").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        f"Peerflix url: {config.peerflix_url} "
        f"(default timeout {config.default_peerflix_timeout}ms)"
    )
    yield


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


async def sanity_check():
    logger.info("Performing sanity check...")

    logger.info("Addons | Checking addons...")
    url = f"{config.peerflix_url}manifest.json"
    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.get(url)
            if response.status_code not in [200, 302, 307]:
                logger.warning(f"Addons | ⚠️ {url} (Status: {response.status_code})")
            else:
                logger.info(f"Addons | ✅ {url}")
    except (httpx.ReadTimeout, httpx.ConnectTimeout):
        logger.warning(f"Addons | ⚠️ {url} (Timeout)")
    except httpx.HTTPError as e:
        logger.warning(f"Addons | ⚠️ {url} ({str(e)})")

    logger.info("Config | Checking config...")
    if not config.get_supported_services("peerflix"):
        logger.warning("Config | ⚠️ No supported services configured for peerflix")
    if not ENCRYPTION_KEY:
        logger.warning("Config | ⚠️ No ENCRYPTION_KEY set, user configs are not encrypted")
    logger.info("Config | ✅ Config loaded")


if __name__ == "__main__":
    asyncio.run(sanity_check())
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8469,
        log_config={
            "version": 1,
            "disable_existing_loggers": False,
            "loggers": {
                "uvicorn.access": {"level": "WARNING"},
            },
        },
    )
