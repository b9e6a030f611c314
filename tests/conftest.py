import asyncio
import os

os.environ.setdefault("LOG_FILE", os.devnull)

import pytest

from services.base import StreamingService
from utils.models import Service, StreamRequest, UserConfig


class FakePeerflix(StreamingService):
    """Records how it was built and answers from a per-config script."""

    def __init__(self, recorder, config_string, override_url, addon_name, addon_id, user_config, indexer_timeout=None):
        self.recorder = recorder
        self.config_string = config_string
        self.override_url = override_url
        self.addon_name = addon_name or "Peerflix"
        self.addon_id = addon_id
        self.indexer_timeout = indexer_timeout
        recorder.created.append(self)

    @property
    def name(self) -> str:
        return self.addon_name

    async def get_parsed_streams(self, stream_request):
        key = self.override_url or self.config_string
        self.recorder.calls.append(key)
        await asyncio.sleep(self.recorder.delays.get(key, 0))
        self.recorder.completed.append(key)
        if key in self.recorder.failures:
            raise self.recorder.failures[key]
        return [{"name": f"stream from {key}", "request": stream_request.id}]


class FetcherRecorder:
    def __init__(self):
        self.created = []
        self.calls = []
        self.completed = []
        self.delays = {}
        self.failures = {}

    def __call__(self, *args):
        return FakePeerflix(self, *args)

    @property
    def config_strings(self):
        return [fetcher.config_string for fetcher in self.created]


@pytest.fixture
def recorder():
    return FetcherRecorder()


@pytest.fixture
def stream_request():
    return StreamRequest(type="movie", id="tt0111161")


@pytest.fixture
def user_config():
    return UserConfig(
        services=[
            Service(id="realdebrid", enabled=True, credentials={"apiKey": "RD"}),
            Service(id="premiumize", enabled=False, credentials={"apiKey": "PM"}),
            Service(id="putio", enabled=True, credentials={"clientId": "C", "token": "T"}),
            Service(id="torbox", enabled=True, credentials={"apiKey": "TB"}),
        ]
    )
