"""Contrato de los link-walking engines.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite que cada media type tenga su walker y que el orquestador los trate
  de forma intercambiable (y testeable con walkers falsos).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Protocol, Sequence, runtime_checkable

from core.domain.models import Step

if TYPE_CHECKING:
    from adapters.http_client import Transport

TemplateParameters = Mapping[str, Any] | Sequence[Mapping[str, Any] | None] | None


@runtime_checkable
class LinkWalker(Protocol):
    """Contrato mínimo de un walker.

    Reglas de diseño:
    - `walk` y `process` son asíncronos porque hacen I/O (HTTP).
    - `check_http_status` y `parse` son síncronos y lanzan excepciones.
    """

    start_uri: str
    links: list[str]
    template_parameters: TemplateParameters
    transport: Transport

    async def walk(self) -> tuple[Step, Step | None]:
        """Recorre `links` y devuelve `(next_step, last_step)`.

        Ante un fallo lanza `TraversalError` con el último step alcanzado.
        """

        ...

    async def process(self, step: Step) -> Step:
        """Materializa un step: descarga si solo tiene URI, si no lo deja pasar."""

        ...

    def check_http_status(self, step: Step) -> None:
        ...

    def parse(self, step: Step) -> Any:
        ...

    def absolute_uri(self, uri: str) -> str:
        """Resuelve un href relativo contra `start_uri`."""

        ...
