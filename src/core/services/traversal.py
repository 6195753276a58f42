"""Traversal orchestration.

A `Traversal` follows a chain of link relations from a start URI and then
runs exactly one terminal action on the resource it reaches:

- `get()` returns the HTTP response (a synthetic one for embedded resources),
- `get_resource()` returns the parsed document,
- `get_uri()` returns the address without fetching it,
- `post()` / `put()` / `patch()` / `delete()` send a request to it.

Every action first walks the chain through the media-type specific walker
(stage 1). `get` and `get_resource` then materialise the terminal node
(stage 2). Finally the result is shaped (stage 3). Errors raised from each
stage carry the step that was last reached so callers can see how far the
traversal progressed.

A traversal is single use: once a terminal action has started the instance
cannot be reconfigured or run again.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

import httpx
from loguru import logger

from adapters.http_client import Transport
from adapters.walkers import create_walker
from core.config import AppSettings
from core.domain.media_types import MediaType
from core.domain.models import EmbeddedResponse, Step, WriteResult
from core.errors import (
    AddressResolutionError,
    ConfigurationError,
    DocumentParseError,
    LinkwalkError,
    MaterializationError,
    TransportError,
    TraversalError,
)
from core.interfaces.walker import LinkWalker, TemplateParameters
from core.logging_utils import silence_library_logging

silence_library_logging()


class Traversal:
    """Builder and runner for one hypermedia traversal."""

    def __init__(
        self,
        media_type: MediaType | str,
        start_uri: str,
        *,
        settings: AppSettings | None = None,
    ) -> None:
        self._walker: LinkWalker = create_walker(media_type, start_uri, settings=settings)
        self._started = False

    @property
    def start_uri(self) -> str:
        return self._walker.start_uri

    @property
    def links(self) -> list[str]:
        return list(self._walker.links)

    @property
    def template_parameters(self) -> TemplateParameters:
        return self._walker.template_parameters

    @property
    def transport(self) -> Transport:
        """The transport shared with the walker."""

        return self._walker.transport

    @property
    def walker(self) -> LinkWalker:
        return self._walker

    # Configuration

    def follow(self, *relations: str | list[str] | tuple[str, ...]) -> "Traversal":
        """Set the link relations to follow.

        `follow("a", "b")` and `follow(["a", "b"])` are equivalent.
        """

        self._ensure_configurable()
        if len(relations) == 1 and isinstance(relations[0], (list, tuple)):
            links = list(relations[0])
        else:
            links = list(relations)
        if not all(isinstance(link, str) for link in links):
            raise ConfigurationError(f"Link relations must be strings, got {links!r}")
        self._walker.links = links
        return self

    walk = follow

    def with_template_parameters(self, parameters: TemplateParameters) -> "Traversal":
        """Install URI template parameters.

        A mapping applies to every hop; a sequence of mappings is indexed per
        hop (index 0 is the start URI).
        """

        self._ensure_configurable()
        self._walker.template_parameters = parameters
        return self

    def with_request_options(
        self, options: Mapping[str, Any] | None = None, **kwargs: Any
    ) -> "Traversal":
        """Replace the transport options used for every request of this traversal.

        Accepts any `httpx.AsyncClient` argument (headers, auth, params,
        timeout, cookies, transport, ...). The walker shares the same
        transport, so intermediate hops observe the same options.
        """

        self._ensure_configurable()
        merged = dict(options or {})
        merged.update(kwargs)
        try:
            self.transport.configure(merged)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
        return self

    # Terminal actions

    async def get(self) -> httpx.Response | EmbeddedResponse:
        next_step, _ = await self._walk()
        step = await self._process(next_step)
        if step.response is None and step.doc is not None:
            logger.debug("faking HTTP response for embedded resource")
            return EmbeddedResponse.from_doc(step.doc)
        return step.response

    async def get_resource(self) -> Any:
        """Like `get()` but returns the parsed document instead of the response."""

        next_step, _ = await self._walk()
        step = await self._process(next_step)
        logger.debug("resulting step: {}", step.describe())
        if step.doc is not None:
            return step.doc

        try:
            self._walker.check_http_status(step)
            return self._walker.parse(step)
        except LinkwalkError:
            raise
        except Exception as exc:
            raise DocumentParseError(
                f"Could not read the resource at {step.uri}: {exc}",
                step=step,
                doc=getattr(exc, "doc", None),
            ) from exc

    async def get_uri(self) -> str:
        """Return the URI of the terminal resource without requesting it."""

        next_step, _ = await self._walk()
        logger.debug("returning uri")
        return self._address_of(next_step)

    async def post(self, body: Any = None) -> WriteResult:
        return await self._walk_and_execute("POST", body)

    async def put(self, body: Any = None) -> WriteResult:
        return await self._walk_and_execute("PUT", body)

    async def patch(self, body: Any = None) -> WriteResult:
        return await self._walk_and_execute("PATCH", body)

    async def delete(self) -> WriteResult:
        return await self._walk_and_execute("DELETE", None)

    # Pipeline stages

    async def _walk(self) -> tuple[Step, Step | None]:
        self._start()
        try:
            next_step, last_step = await self._walker.walk()
        except TraversalError as exc:
            logger.debug("walker.walk failed at {}: {}", exc.uri, exc)
            raise
        except (LinkwalkError, httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TraversalError(str(exc), step=getattr(exc, "step", None)) from exc
        logger.debug("walker.walk returned, next step: {}", next_step.describe())
        return next_step, last_step

    async def _process(self, next_step: Step) -> Step:
        try:
            step = await self._walker.process(next_step)
        except (LinkwalkError, httpx.HTTPError, httpx.InvalidURL) as exc:
            raise MaterializationError(
                f"Could not fetch {next_step.describe()}: {exc}", step=next_step
            ) from exc
        logger.debug("walker.process returned")
        return step

    async def _walk_and_execute(self, method: str, body: Any) -> WriteResult:
        next_step, _ = await self._walk()
        logger.debug("executing final request with step: {}", next_step.describe())
        return await self._execute_request(self._address_of(next_step), method, body)

    async def _execute_request(self, uri: str, method: str, body: Any) -> WriteResult:
        payload = json.dumps(body) if body is not None else None
        logger.debug("request to {} {} with body {}", method, uri, payload)
        try:
            response = await self.transport.request(method, uri, body=payload)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(f"{method} {uri} failed: {exc}", uri=uri) from exc
        logger.debug("request to {} succeeded", uri)
        return WriteResult(response=response, uri=uri)

    def _address_of(self, step: Step) -> str:
        if step.uri:
            return step.uri
        self_href = _self_href(step.doc)
        if self_href:
            return self._walker.absolute_uri(self_href)
        raise AddressResolutionError(
            "You requested an URI but the last resource is an embedded resource "
            'and has no URI of its own (that is, it has no link with rel="self")',
            step=step,
            doc=step.doc,
        )

    def _ensure_configurable(self) -> None:
        if self._started:
            raise ConfigurationError(
                "This traversal has already started; create a new Traversal to reconfigure"
            )

    def _start(self) -> None:
        if self._started:
            raise ConfigurationError(
                "A Traversal runs a single terminal action; create a new Traversal"
            )
        self._started = True


def _self_href(doc: Any) -> str | None:
    if not isinstance(doc, dict):
        return None
    links = doc.get("_links")
    if not isinstance(links, dict):
        return None
    self_link = links.get("self")
    if isinstance(self_link, list):
        self_link = self_link[0] if self_link else None
    if isinstance(self_link, dict) and isinstance(self_link.get("href"), str):
        return self_link["href"] or None
    return None


def from_media_type(
    media_type: MediaType | str, start_uri: str, *, settings: AppSettings | None = None
) -> Traversal:
    return Traversal(media_type, start_uri, settings=settings)


def from_json(start_uri: str, *, settings: AppSettings | None = None) -> Traversal:
    """Traversal over plain JSON documents."""

    return Traversal(MediaType.JSON, start_uri, settings=settings)


def from_json_hal(start_uri: str, *, settings: AppSettings | None = None) -> Traversal:
    """Traversal over JSON-HAL documents (links and embedded resources)."""

    return Traversal(MediaType.JSON_HAL, start_uri, settings=settings)
