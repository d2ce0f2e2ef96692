"""Configuration loading and Pydantic models for cephmeta."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class BucketConfig(BaseModel):
    """Source bucket location and credentials.

    ``endpoint`` is the RGW base URL used for path-style addressing.  When
    ``bucket_endpoint`` is set it takes precedence; any ``${bucket}`` in it is
    replaced by the bucket name (virtual-host style).
    """

    name: str = ""
    endpoint: str = "http://127.0.0.1:7480"
    bucket_endpoint: str = ""
    access_key: str = ""
    secret_key: str = ""
    security_token: str = ""


class ClientConfig(BaseModel):
    """HTTP client configuration."""

    timeout: float = 30.0
    verify_tls: bool = True


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "text"
    library_level: str | None = None


class CephMetaConfig(BaseModel):
    """Top-level cephmeta configuration."""

    bucket: BucketConfig = Field(default_factory=BucketConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    metrics: bool = False


def _parse_bucket(data: dict[str, Any] | None) -> dict[str, Any]:
    """Parse the bucket section from YAML data.

    Handles nested structure: bucket.credentials.access_key -> access_key
    """
    if data is None:
        return {}
    result: dict[str, Any] = {
        "name": data.get("name", ""),
        "endpoint": data.get("endpoint", "http://127.0.0.1:7480"),
        "bucket_endpoint": data.get("bucket_endpoint", ""),
    }
    credentials = data.get("credentials")
    if isinstance(credentials, dict):
        result["access_key"] = credentials.get("access_key", "")
        result["secret_key"] = credentials.get("secret_key", "")
        result["security_token"] = credentials.get("security_token", "")
    return result


def _parse_client(data: dict[str, Any] | None) -> dict[str, Any]:
    """Parse the client section from YAML data."""
    if data is None:
        return {}
    return {
        "timeout": data.get("timeout", 30.0),
        "verify_tls": data.get("verify_tls", True),
    }


def _parse_logging(data: dict[str, Any] | None) -> dict[str, Any]:
    """Parse the logging section from YAML data."""
    if data is None:
        return {}
    return {
        "level": data.get("level", "INFO"),
        "format": data.get("format", "text"),
        "library_level": data.get("library_level"),
    }


def load_config(path: Path) -> CephMetaConfig:
    """Load a CephMetaConfig from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        A fully populated CephMetaConfig validated by Pydantic.

    Raises:
        FileNotFoundError: If the config file does not exist.
        yaml.YAMLError: If the file is not valid YAML.
    """
    with open(path, "r") as fh:
        raw: dict[str, Any] = yaml.safe_load(fh) or {}

    return CephMetaConfig(
        bucket=BucketConfig(**_parse_bucket(raw.get("bucket"))),
        client=ClientConfig(**_parse_client(raw.get("client"))),
        logging=LoggingConfig(**_parse_logging(raw.get("logging"))),
        metrics=raw.get("metrics", False),
    )
