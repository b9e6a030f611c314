from typing import List


class PeerflixError(Exception):
    pass


class InvalidConfigError(PeerflixError):
    pass


class MissingCredentialError(PeerflixError, ValueError):
    def __init__(self, service_id: str, field: str):
        self.service_id = service_id
        self.field = field
        super().__init__(f"Missing credential '{field}' for service {service_id}")


class TransportError(PeerflixError):
    pass


class IndexerTimeoutError(TransportError):
    pass


class FetchError(PeerflixError):
    """Raised when every instance of a fan-out failed."""

    def __init__(self, errors: List[BaseException]):
        self.errors = errors
        details = "; ".join(str(e) for e in errors)
        super().__init__(f"All {len(errors)} instances failed: {details}")
