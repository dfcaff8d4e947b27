"""Service configuration loaded from environment variables.

Every model is frozen: a configuration value is built once at startup and
handed to the components that need it.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FeedConfig(BaseSettings):
    """Naming, addressing and size limits of the generated feeds."""

    model_config = SettingsConfigDict(env_prefix="FEED_", frozen=True)

    name: str = Field(
        default="Kill the Newsletter!",
        description="Service name, used as author of the inbox-created entry",
    )
    domain: str = Field(
        default="www.kill-the-newsletter.com",
        description="Public web domain serving the feeds",
    )
    email_domain: str = Field(
        default="kill-the-newsletter.com",
        description="Domain of the generated mailbox addresses",
    )
    urn: str = Field(
        default="kill-the-newsletter",
        description="Namespace of the Atom ids (urn:<urn>:<token>)",
    )
    administrator_email: str = Field(
        default="kill-the-newsletter@leafac.com",
        description="Contact shown when inbox creation fails",
    )
    maximum_size: int = Field(
        default=1_900_000,
        gt=0,
        description="Maximum size of a serialized feed in bytes",
    )
    name_maximum_size: int = Field(
        default=1_000,
        gt=0,
        description="Maximum length of a newsletter name in characters",
    )


class StorageConfig(BaseSettings):
    """Object store holding the serialized feeds."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_", frozen=True)

    backend: Literal["s3", "local"] = Field(
        default="s3",
        description="Store implementation: S3-compatible bucket or local directory",
    )
    bucket: str = Field(default="feeds", description="S3 bucket name")
    prefix: str = Field(
        default="",
        description="Optional S3 key prefix for feed documents",
    )
    region: str = Field(default="us-east-1", description="AWS region")
    endpoint_url: str | None = Field(
        default=None,
        description="Custom S3 endpoint URL (e.g. for MinIO or Backblaze B2)",
    )
    local_path: str = Field(
        default="feeds",
        description="Directory used by the local backend",
    )


class Settings(BaseSettings):
    """Top-level settings for the feed service.

    Server settings use the ``LETTERFEED_`` prefix; nested configs are
    populated from their own prefixes.
    Example: ``LETTERFEED_PORT=8080 FEED_EMAIL_DOMAIN=example.com``
    """

    model_config = SettingsConfigDict(env_prefix="LETTERFEED_", frozen=True)

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8000, description="Bind port")
    log_level: str = Field(default="INFO", description="Log level")
    log_json: bool = Field(
        default=True,
        description="Use JSON log output (True for prod, False for dev)",
    )

    feed: FeedConfig = Field(default_factory=FeedConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
