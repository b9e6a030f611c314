from abc import ABC, abstractmethod
from typing import Dict, List

from utils.models import StreamRequest


class StreamingService(ABC):
    @abstractmethod
    async def get_parsed_streams(self, stream_request: StreamRequest) -> List[Dict]:
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        pass
