import base64

import pytest
from cryptography.fernet import Fernet

from utils.errors import InvalidConfigError
from utils.models import AddonEntry, UserConfig
from utils.url_processor import URLProcessor


def test_plain_config_round_trip(user_config):
    processor = URLProcessor()

    encoded = processor.encode_config(user_config)

    assert "=" not in encoded
    assert processor.decode_config(encoded).model_dump() == user_config.model_dump()


def test_encrypted_config_round_trip(user_config):
    processor = URLProcessor(Fernet.generate_key())
    user_config.addons = [AddonEntry(id="peerflix", options={"showP2PStreams": "true"})]

    encoded = processor.encode_config(user_config)

    assert encoded.startswith("E-")
    assert processor.decode_config(encoded).model_dump() == user_config.model_dump()


def test_encrypted_config_needs_a_key(user_config):
    encoded = URLProcessor(Fernet.generate_key()).encode_config(user_config)

    with pytest.raises(InvalidConfigError):
        URLProcessor().decode_config(encoded)


def test_config_from_another_key_is_rejected(user_config):
    encoded = URLProcessor(Fernet.generate_key()).encode_config(user_config)

    with pytest.raises(InvalidConfigError):
        URLProcessor(Fernet.generate_key()).decode_config(encoded)


@pytest.mark.parametrize(
    "config_path",
    [
        "not-base64-at-all!",
        base64.urlsafe_b64encode(b"[1, 2]").decode(),
        base64.urlsafe_b64encode(b'{"services": [{"enabled": true}]}').decode(),
    ],
)
def test_garbage_is_rejected(config_path):
    with pytest.raises(InvalidConfigError):
        URLProcessor().decode_config(config_path)


def test_manifest_url(user_config):
    url = URLProcessor().manifest_url(user_config)

    assert url.startswith("http://localhost:8469/")
    assert url.endswith("/manifest.json")
