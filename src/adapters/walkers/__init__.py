"""Link-walking engines (uno por media type).

Por qué un registro:
- El orquestador no ramifica por media type; pide un walker al factory.
- Añadir un media type nuevo = registrar una clase aquí.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from adapters.http_client import Transport
from adapters.walkers.base import BaseWalker
from adapters.walkers.json_hal_walker import JsonHalWalker, LinkKey
from adapters.walkers.json_walker import JsonWalker
from core.config import AppSettings
from core.domain.media_types import MediaType
from core.errors import ConfigurationError

_WALKERS: dict[str, type[BaseWalker]] = {
    MediaType.JSON.value: JsonWalker,
    MediaType.JSON_HAL.value: JsonHalWalker,
}


def walker_class_for(media_type: Any) -> type[BaseWalker]:
    """Devuelve la clase de walker para un media type o lanza `ConfigurationError`."""

    tag = media_type.value if isinstance(media_type, MediaType) else media_type
    walker_cls = _WALKERS.get(tag) if isinstance(tag, str) else None
    if walker_cls is None:
        raise ConfigurationError(f"Unknown or unsupported media type: {media_type!r}")
    return walker_cls


def create_walker(
    media_type: Any,
    start_uri: str,
    *,
    settings: AppSettings | None = None,
) -> BaseWalker:
    """Crea un walker con su `Transport`.

    El media type se valida antes de crear nada, así que un tag desconocido
    falla sin estado parcial ni I/O.
    """

    walker_cls = walker_class_for(media_type)
    logger.debug("creating new {}", walker_cls.__name__)
    transport = Transport(settings, default_headers={"Accept": walker_cls.media_type})
    return walker_cls(transport, start_uri)


__all__ = [
    "BaseWalker",
    "JsonHalWalker",
    "JsonWalker",
    "LinkKey",
    "create_walker",
    "walker_class_for",
]
