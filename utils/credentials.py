from typing import Dict, Iterable, Tuple

from utils.errors import MissingCredentialError

ConfigPair = Tuple[str, str]

P2P_PAIR: ConfigPair = ("debridoptions", "torrentlinks")


def normalize_service_id(service_id: str) -> str:
    return service_id.replace("-", "")


def _require(service_id: str, credentials: Dict[str, str], field: str) -> str:
    value = credentials.get(field)
    if not value:
        raise MissingCredentialError(service_id, field)
    return value


def get_service_pair(service_id: str, credentials: Dict[str, str]) -> ConfigPair:
    """Encode a service's credentials as a Peerflix config pair.

    Put.io needs both its client id and token, joined as ``clientId@token``.
    Every other service is configured with its API key.
    """
    key = normalize_service_id(service_id)
    if key == "putio":
        client_id = _require(service_id, credentials, "clientId")
        token = _require(service_id, credentials, "token")
        return key, f"{client_id}@{token}"
    return key, _require(service_id, credentials, "apiKey")


def render_config_string(pairs: Iterable[ConfigPair]) -> str:
    return "|".join(f"{key}={value}" for key, value in pairs)
