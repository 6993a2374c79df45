"""
Shared column types for ORM models.

Dependencies: sqlalchemy
System role: Column type helpers
"""

import enum

from sqlalchemy import Enum


def status_enum(enum_cls: type[enum.Enum]) -> Enum:
    """
    Non-native enum column persisting the enum *values* ("in_progress"),
    not member names, so rows read the same as the API.
    """
    return Enum(
        enum_cls,
        native_enum=False,
        length=32,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
    )
