import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

LEADING_INTEGER = re.compile(r"\s*([+-]?\d+)")


class Service(BaseModel):
    id: str
    enabled: bool = False
    credentials: Dict[str, str] = {}


class AddonEntry(BaseModel):
    id: str
    options: Dict[str, Any] = {}


class UserConfig(BaseModel):
    services: List[Service] = []
    addons: List[AddonEntry] = []


class StreamRequest(BaseModel):
    type: str
    id: str


class DispatchOptions(BaseModel):
    show_p2p_streams: bool = False
    use_multiple_instances: bool = False
    override_url: Optional[str] = None
    override_name: Optional[str] = None
    timeout: Optional[int] = None


class PeerflixOptions(BaseModel):
    """Addon options as they arrive from the user config, every value a string."""

    model_config = ConfigDict(populate_by_name=True)

    show_p2p_streams: Optional[str] = Field(default=None, alias="showP2PStreams")
    use_multiple_instances: Optional[str] = Field(
        default=None, alias="useMultipleInstances"
    )
    override_url: Optional[str] = Field(default=None, alias="overrideUrl")
    indexer_timeout: Optional[str] = Field(default=None, alias="indexerTimeout")
    override_name: Optional[str] = Field(default=None, alias="overrideName")

    def parse(self) -> DispatchOptions:
        # "5000ms" reads as 5000; anything without a positive leading number
        # falls back to the default timeout
        timeout = None
        match = LEADING_INTEGER.match(self.indexer_timeout or "")
        if match and int(match.group(1)) > 0:
            timeout = int(match.group(1))

        return DispatchOptions(
            show_p2p_streams=self.show_p2p_streams == "true",
            use_multiple_instances=self.use_multiple_instances == "true",
            override_url=self.override_url or None,
            override_name=self.override_name or None,
            timeout=timeout,
        )
