"""Media types soportados.

Centraliza los tags de media type aceptados por el factory de walkers, para que
CLI, servicios y adaptadores compartan una única fuente de verdad.
"""

from __future__ import annotations

from enum import Enum


class MediaType(str, Enum):
    """Media types for which a link-walking engine exists."""

    JSON = "application/json"
    JSON_HAL = "application/hal+json"

    @classmethod
    def from_bool(cls, hal: bool) -> "MediaType":
        """Derive a media type from a boolean flag."""

        return cls.JSON_HAL if hal else cls.JSON
