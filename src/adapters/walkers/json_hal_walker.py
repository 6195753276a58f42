"""Walker para `application/hal+json`.

Reglas de búsqueda del siguiente hop para una relación:
1. `_links[rel]`: un link real, el siguiente step es una URI a descargar.
2. `_embedded[rel]`: un recurso embebido, el siguiente step ya trae `doc` y no
   hace falta ninguna request.

Sintaxis de relación soportada:
- `rel` (primer elemento), `rel[2]` (por índice), `rel[name:foo]` (por nombre)
- `rel[$all]` (todos los recursos embebidos como lista)
- una URI completa que corresponda a un CURIE declarado en `_links.curies`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from loguru import logger
from pydantic import ValidationError

from adapters.walkers.base import BaseWalker
from core.domain.media_types import MediaType
from core.domain.models import HalLink, Step
from core.errors import LinkNotFoundError

_KEY_PATTERN = re.compile(r"^(?P<rel>.+?)\[(?P<selector>[^\[\]]+)\]$")


@dataclass(frozen=True)
class LinkKey:
    """Una relación ya parseada (`rel`, `rel[1]`, `rel[name:foo]`)."""

    rel: str
    index: int | None = None
    secondary_key: str | None = None
    secondary_value: str | None = None
    all: bool = False

    @classmethod
    def parse(cls, key: str) -> "LinkKey":
        match = _KEY_PATTERN.match(key)
        if not match:
            return cls(rel=key)
        rel, selector = match.group("rel"), match.group("selector").strip()
        if selector == "$all":
            return cls(rel=rel, all=True)
        if selector.isdigit():
            return cls(rel=rel, index=int(selector))
        if ":" in selector:
            name, value = selector.split(":", 1)
            return cls(rel=rel, secondary_key=name.strip(), secondary_value=value.strip())
        return cls(rel=key)


class JsonHalWalker(BaseWalker):
    media_type = MediaType.JSON_HAL.value

    def find_next_step(self, doc: Any, link: str) -> Step:
        if not isinstance(doc, dict):
            raise LinkNotFoundError(f"Expected a HAL document (object) while looking up {link!r}")

        key = LinkKey.parse(link)
        rel = _resolve_curie(doc, key.rel)
        if rel != key.rel:
            logger.debug("resolved {!r} to CURIE {!r}", key.rel, rel)

        step = _find_link(doc, rel, key) or _find_embedded(doc, rel, key)
        if step is None:
            raise LinkNotFoundError(
                f"Could not find a link nor an embedded object for {link!r} in the document"
            )
        return step


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _section(doc: dict[str, Any], name: str) -> dict[str, Any]:
    # `_links` / `_embedded` que no sean objetos se tratan como ausentes.
    value = doc.get(name)
    return value if isinstance(value, dict) else {}


def _resolve_curie(doc: dict[str, Any], rel: str) -> str:
    links = _section(doc, "_links")
    embedded = _section(doc, "_embedded")
    if rel in links or rel in embedded:
        return rel
    for curie in _as_list(links.get("curies")):
        if not isinstance(curie, dict):
            continue
        name, href = curie.get("name"), curie.get("href")
        if not name or not isinstance(href, str) or "{rel}" not in href:
            continue
        prefix, suffix = href.split("{rel}", 1)
        if rel.startswith(prefix) and rel.endswith(suffix) and len(rel) > len(prefix) + len(suffix):
            return f"{name}:{rel[len(prefix):len(rel) - len(suffix)]}"
    return rel


def _find_link(doc: dict[str, Any], rel: str, key: LinkKey) -> Step | None:
    raw_links = _as_list(_section(doc, "_links").get(rel))
    if not raw_links or key.all:
        return None
    try:
        links = [HalLink.model_validate(item) for item in raw_links]
    except ValidationError as exc:
        raise LinkNotFoundError(f"Malformed link for {rel!r}: {exc.errors()[0]['msg']}") from exc

    if key.secondary_key is not None:
        for hal_link in links:
            if getattr(hal_link, key.secondary_key, None) == key.secondary_value:
                return Step(uri=hal_link.href)
        return None
    index = key.index or 0
    if index >= len(links):
        return None
    return Step(uri=links[index].href)


def _find_embedded(doc: dict[str, Any], rel: str, key: LinkKey) -> Step | None:
    resources = [r for r in _as_list(_section(doc, "_embedded").get(rel)) if isinstance(r, dict)]
    if not resources:
        return None
    if key.all:
        return Step(doc=resources)
    if key.secondary_key is not None:
        for resource in resources:
            if resource.get(key.secondary_key) == key.secondary_value:
                return Step(doc=resource)
        return None
    index = key.index or 0
    if index >= len(resources):
        return None
    return Step(doc=resources[index])
