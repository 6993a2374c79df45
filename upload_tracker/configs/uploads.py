"""
Batch upload configuration.

Limits applied at batch issuance and the retry budget used when the
database reports a transient write conflict.

Dependencies: pydantic_settings
System role: Upload batch policy configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class UploadSettings(BaseSettings):
    """Batch limits and contention retry policy."""

    model_config = SettingsConfigDict(
        env_prefix="UPLOADS_",
        case_sensitive=False,
        extra="ignore",
    )

    max_items_per_batch: int = Field(
        default=500,
        ge=1,
        description="Maximum number of item descriptors accepted per batch",
    )
    max_name_length: int = Field(
        default=500,
        ge=1,
        description="Maximum length of an item name",
    )
    allowed_content_types: list[str] = Field(
        default_factory=list,
        description="Accepted content types; empty list accepts any",
    )
    contention_max_attempts: int = Field(
        default=5,
        ge=1,
        description="Attempts for one item transition before reporting contention",
    )
    contention_backoff_initial: float = Field(
        default=0.05,
        description="First backoff delay in seconds between contention retries",
    )
    contention_backoff_max: float = Field(
        default=1.0,
        description="Upper bound in seconds for a single contention backoff",
    )
