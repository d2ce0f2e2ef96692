"""Tests for cephmeta configuration loading."""

import tempfile
from pathlib import Path

import yaml

from cephmeta.config import CephMetaConfig, load_config


def _write_yaml(data) -> Path:
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        yaml.dump(data, f)
        f.flush()
        return Path(f.name)


class TestLoadConfig:
    """Tests for load_config()."""

    def test_load_example_config(self):
        """Loading the example config file populates all fields."""
        config = load_config(Path(__file__).resolve().parent.parent / "cephmeta.example.yaml")
        assert config.bucket.name == "media"
        assert config.bucket.endpoint == "http://127.0.0.1:7480"
        assert config.bucket.bucket_endpoint == ""
        assert config.bucket.access_key == "cephmeta"
        assert config.bucket.secret_key == "cephmeta-secret"
        assert config.client.timeout == 30
        assert config.client.verify_tls is True
        assert config.logging.level == "INFO"
        assert config.metrics is False

    def test_load_minimal_config(self):
        """Loading an empty YAML uses defaults for all fields."""
        config = load_config(_write_yaml({}))
        assert config.bucket.name == ""
        assert config.bucket.endpoint == "http://127.0.0.1:7480"
        assert config.client.timeout == 30.0
        assert config.logging.format == "text"
        assert config.logging.library_level is None

    def test_nested_credentials(self):
        """bucket.credentials.* is flattened onto the bucket section."""
        config = load_config(
            _write_yaml(
                {
                    "bucket": {
                        "name": "b1",
                        "endpoint": "https://rgw.internal",
                        "credentials": {
                            "access_key": "ak",
                            "secret_key": "sk",
                            "security_token": "tok",
                        },
                    }
                }
            )
        )
        assert config.bucket.name == "b1"
        assert config.bucket.endpoint == "https://rgw.internal"
        assert config.bucket.access_key == "ak"
        assert config.bucket.secret_key == "sk"
        assert config.bucket.security_token == "tok"

    def test_client_and_logging_sections(self):
        config = load_config(
            _write_yaml(
                {
                    "client": {"timeout": 5, "verify_tls": False},
                    "logging": {"level": "DEBUG", "format": "json", "library_level": "WARNING"},
                    "metrics": True,
                }
            )
        )
        assert config.client.timeout == 5.0
        assert config.client.verify_tls is False
        assert config.logging.level == "DEBUG"
        assert config.logging.format == "json"
        assert config.logging.library_level == "WARNING"
        assert config.metrics is True

    def test_defaults_instance(self):
        """CephMetaConfig() with no arguments uses sane defaults."""
        config = CephMetaConfig()
        assert config.bucket.access_key == ""
        assert config.client.verify_tls is True
        assert config.metrics is False
