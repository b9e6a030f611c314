from typing import Iterable, List

from utils.credentials import normalize_service_id
from utils.models import Service


def select_services(services: Iterable[Service], supported_ids: Iterable[str]) -> List[Service]:
    """Keep the enabled services the addon supports, in their configured order.

    Ids are compared the way they are encoded, so ``real-debrid`` matches
    ``realdebrid``.
    """
    supported = {normalize_service_id(service_id) for service_id in supported_ids}
    return [
        service
        for service in services
        if service.enabled and normalize_service_id(service.id) in supported
    ]
