"""Walker para `application/json` plano.

En JSON plano el link de una relación es simplemente el string guardado bajo
esa clave del documento. Se admiten rutas con puntos (`meta.next`) para links
anidados.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from adapters.walkers.base import BaseWalker
from core.domain.media_types import MediaType
from core.domain.models import Step
from core.errors import LinkNotFoundError


class JsonWalker(BaseWalker):
    media_type = MediaType.JSON.value

    def find_next_step(self, doc: Any, link: str) -> Step:
        logger.debug("looking up {!r} in JSON document", link)
        value = _lookup(doc, link)
        if not isinstance(value, str) or not value:
            raise LinkNotFoundError(
                f"Could not find property {link!r} holding a link in the document"
            )
        return Step(uri=value)


def _lookup(doc: Any, path: str) -> Any:
    if isinstance(doc, dict) and path in doc:
        return doc[path]
    current = doc
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return None
        current = current[part]
    return current
