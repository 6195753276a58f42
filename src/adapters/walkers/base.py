"""Motor genérico de recorrido de links.

Idea:
- El bucle de hops, la materialización de steps, la expansión de templates y
  el chequeo de status son iguales para todos los media types.
- Cada subclase solo decide "cuál es el siguiente hop" (`find_next_step`).
"""

from __future__ import annotations

import json
from typing import Any, Mapping
from urllib.parse import urljoin, urlsplit

import httpx
import uritemplate
from loguru import logger

from adapters.http_client import Transport
from core.domain.models import Step
from core.errors import DocumentParseError, HttpStatusError, LinkwalkError, TraversalError
from core.interfaces.walker import TemplateParameters


class BaseWalker:
    """Implementación base del contrato `LinkWalker`."""

    media_type: str = "application/json"

    def __init__(self, transport: Transport, start_uri: str) -> None:
        self.transport = transport
        self.start_uri = start_uri
        self.links: list[str] = []
        self.template_parameters: TemplateParameters = None

    async def walk(self) -> tuple[Step, Step | None]:
        start_uri = self.resolve_uri_template(self.start_uri, 0)
        next_step = Step(uri=start_uri)
        last_step: Step | None = None

        for index, link in enumerate(self.links):
            try:
                step = await self.process(next_step)
                if not step.is_embedded:
                    self.check_http_status(step)
                    step.doc = self.parse(step)
            except (LinkwalkError, httpx.HTTPError, httpx.InvalidURL) as exc:
                # Before the first hop only the start address is known.
                raise TraversalError(
                    f"Could not resolve {next_step.describe()} while following {link!r}: {exc}",
                    step=last_step or Step(uri=start_uri),
                ) from exc

            last_step = step
            try:
                next_step = self.find_next_step(step.doc, link)
                if next_step.uri is not None:
                    next_step.uri = self.resolve_uri_template(self.absolute_uri(next_step.uri), index + 1)
            except (LinkwalkError, ValueError) as exc:
                raise TraversalError(str(exc), step=last_step) from exc
            logger.debug("hop {} ({}) -> {}", index, link, next_step.describe())

        return next_step, last_step

    async def process(self, step: Step) -> Step:
        if step.doc is not None:
            return step
        if step.uri is None:
            raise TraversalError("Step has neither a URI nor a document", step=step)
        step.response = await self.transport.get(step.uri)
        return step

    def check_http_status(self, step: Step) -> None:
        status = step.response.status_code
        if 200 <= status < 300:
            return
        text = step.response.text
        try:
            doc = json.loads(text)
        except ValueError:
            doc = text
        raise HttpStatusError(
            f"HTTP GET for {step.uri} resulted in HTTP status code {status}.",
            status_code=status,
            step=step,
            doc=doc,
        )

    def parse(self, step: Step) -> Any:
        text = step.response.text
        try:
            return json.loads(text)
        except ValueError as exc:
            raise DocumentParseError(
                f"The document at {step.uri} could not be parsed as JSON: {text[:200]!r}",
                step=step,
                doc=text,
            ) from exc

    def find_next_step(self, doc: Any, link: str) -> Step:
        raise NotImplementedError

    def absolute_uri(self, uri: str) -> str:
        """Hrefs que empiezan por `/` se anexan a `start_uri`; las absolutas se respetan."""

        if urlsplit(uri).scheme:
            return uri
        base = self.resolve_uri_template(self.start_uri, 0).rstrip("/")
        if uri.startswith("/"):
            return base + uri
        return urljoin(base + "/", uri)

    def resolve_uri_template(self, uri: str, index: int) -> str:
        parameters = self._template_parameters_for(index)
        if parameters is None or "{" not in uri:
            return uri
        return uritemplate.expand(uri, dict(parameters))

    def _template_parameters_for(self, index: int) -> Mapping[str, Any] | None:
        parameters = self.template_parameters
        if parameters is None:
            return None
        if isinstance(parameters, Mapping):
            return parameters
        if index < len(parameters):
            return parameters[index]
        return None
