import base64
import json
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken
from pydantic import ValidationError

from utils.config import config
from utils.errors import InvalidConfigError
from utils.logger import logger
from utils.models import UserConfig

ENCRYPTED_PREFIX = "E-"


class URLProcessor:
    """Packs user configs into url path segments and back.

    Configs are url-safe base64 JSON, or Fernet tokens prefixed with ``E-``
    when an encryption key is available.
    """

    def __init__(self, encryption_key: Optional[bytes] = None):
        self.fernet = Fernet(encryption_key) if encryption_key else None
        self.addon_url = config.addon_url

    def encode_config(self, user_config: UserConfig) -> str:
        payload = user_config.model_dump_json(exclude_defaults=True).encode()
        if self.fernet:
            return ENCRYPTED_PREFIX + self.fernet.encrypt(payload).decode()
        return base64.urlsafe_b64encode(payload).decode().rstrip("=")

    def decode_config(self, config_path: str) -> UserConfig:
        try:
            if config_path.startswith(ENCRYPTED_PREFIX):
                if not self.fernet:
                    raise InvalidConfigError("Encrypted config but no ENCRYPTION_KEY is set")
                payload = self.fernet.decrypt(config_path[len(ENCRYPTED_PREFIX):].encode())
            else:
                # Add padding if needed
                padding_needed = len(config_path) % 4
                if padding_needed:
                    config_path += "=" * (4 - padding_needed)
                payload = base64.urlsafe_b64decode(config_path.encode())
            return UserConfig.model_validate(json.loads(payload))
        except InvalidConfigError:
            raise
        except (InvalidToken, ValueError, ValidationError) as e:
            logger.error(f"Config processing error: {str(e)}")
            raise InvalidConfigError("Invalid config format") from e

    def manifest_url(self, user_config: UserConfig) -> str:
        return f"{self.addon_url}/{self.encode_config(user_config)}/manifest.json"
