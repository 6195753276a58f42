"""Modelos del dominio.

Por qué dataclasses para `Step`:
- Un `Step` se completa durante el recorrido (primero URI, luego response/doc),
  así que necesita ser mutable y guardar un `httpx.Response` tal cual.

Por qué Pydantic para `HalLink`:
- Los links HAL llegan como JSON heterogéneo; validarlos en el borde deja al
  walker trabajar con campos tipados.

Nota:
- Estos modelos describen *qué* es una posición del recorrido, no *cómo* se
  obtiene.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, NamedTuple

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

EMBEDDED_RESPONSE_REMARK = (
    "This is not an actual HTTP response. The resource you requested was an "
    "embedded resource, so no HTTP request was made to acquire it."
)


@dataclass(frozen=True)
class EmbeddedResponse:
    """Respuesta sintética para un recurso embebido.

    Por qué un tipo propio:
    - Quien consume `get()` debe poder distinguir "no hubo request HTTP" de una
      respuesta real; `is_synthetic` y `remark` lo dejan explícito.
    """

    text: str
    status_code: int = 200
    remark: str = EMBEDDED_RESPONSE_REMARK
    is_synthetic: bool = field(default=True, init=False)

    @classmethod
    def from_doc(cls, doc: Any) -> "EmbeddedResponse":
        return cls(text=json.dumps(doc))

    def json(self) -> Any:
        return json.loads(self.text)


@dataclass
class Step:
    """Una posición del recorrido.

    Formas posibles:
    - `Step(uri=...)`: dirección aún no descargada.
    - `Step(uri=..., response=..., doc=...)`: recurso descargado (y parseado).
    - `Step(doc=...)`: documento embebido, resuelto sin I/O de red.
    """

    uri: str | None = None
    response: Any = None
    doc: Any = None

    @property
    def is_embedded(self) -> bool:
        """`doc` sin `response`: resuelto sin request HTTP."""

        return self.doc is not None and self.response is None

    def describe(self) -> str:
        if self.is_embedded:
            return "<embedded document>"
        return self.uri or "<no uri>"


class HalLink(BaseModel):
    """Un link HAL (`_links.<rel>`)."""

    model_config = ConfigDict(extra="allow")

    href: str = Field(..., min_length=1, description="Target URI o URI template.")
    templated: bool = Field(default=False, description="Si `href` es un URI template.")
    name: str | None = Field(default=None, description="Clave secundaria del link.")
    title: str | None = None


class WriteResult(NamedTuple):
    """Resultado de `post`/`put`/`patch`/`delete`: la respuesta y la URI destino."""

    response: Any
    uri: str
