"""
Common response models and utilities.

Base schema with camelCase wire names and the error body shared by every
endpoint.

Dependencies: pydantic
System role: Common API response structures
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Schema serialized with camelCase keys; accepts either case on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(BaseModel):
    """Error response schema."""

    error: str = Field(description="Error kind, e.g. not_found or invalid_transition")
    detail: Any = Field(description="Human-readable message or validation errors")
