"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y redirecciones para cada hop del recorrido.
- Un único objeto `Transport` compartido por el orquestador y el walker: si se
  cambian las opciones (auth, headers), ambos ven lo mismo.
- Facilita testeo: se puede inyectar un `httpx.MockTransport` via opciones.
"""

from __future__ import annotations

from typing import Any, Mapping

import httpx
from loguru import logger

from core.config import AppSettings

# Opciones que se pasan a cada request en lugar de al constructor del cliente.
_REQUEST_ONLY_OPTIONS = frozenset({"json", "data", "files", "content", "extensions"})


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: Mapping[str, str] | None = None,
    **options: Any,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Por qué un builder:
    - Centraliza timeouts/headers para que todos los hops se comporten igual.
    - `options` admite cualquier argumento de `httpx.AsyncClient`
      (auth, params, cookies, transport, ...), y pisa los defaults.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    user_headers = options.pop("headers", None)
    if user_headers:
        headers.update(dict(user_headers))

    timeout = options.pop("timeout", settings.http_timeout_seconds)
    if not isinstance(timeout, httpx.Timeout):
        timeout = httpx.Timeout(timeout)
    options.setdefault("follow_redirects", settings.follow_redirects)

    return httpx.AsyncClient(timeout=timeout, headers=headers, **options)


class Transport:
    """Cliente HTTP compartido de un recorrido.

    Reglas:
    - `configure` reemplaza las opciones; no se copia el objeto, así que el
      walker (que tiene la misma referencia) ve el cambio.
    - Cada request abre y cierra su propio `httpx.AsyncClient` (mismo patrón
      `async with build_async_client(...)` por llamada); no se reutilizan
      conexiones entre hops, a cambio de que `configure` aplique siempre a la
      siguiente request sin cliente cacheado que invalidar.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        default_headers: Mapping[str, str] | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._default_headers = dict(default_headers or {})
        self._options: dict[str, Any] = dict(options or {})

    @property
    def options(self) -> Mapping[str, Any]:
        return dict(self._options)

    def configure(self, options: Mapping[str, Any]) -> None:
        """Reemplaza las opciones (equivalente a `request.defaults(options)`)."""

        unknown = _REQUEST_ONLY_OPTIONS.intersection(options)
        if unknown:
            raise ValueError(f"Per-request options are not transport options: {sorted(unknown)}")
        self._options = dict(options)

    async def request(self, method: str, uri: str, *, body: str | None = None) -> httpx.Response:
        """Ejecuta `method` contra `uri`; `body` ya viene serializado."""

        options = dict(self._options)
        extra_headers = dict(self._default_headers)
        if body is not None:
            extra_headers.setdefault("Content-Type", "application/json")

        logger.debug("request {} {} with options {}", method, uri, sorted(options))
        async with build_async_client(self._settings, extra_headers=extra_headers, **options) as client:
            response = await client.request(method, uri, content=body)
        logger.debug("request {} {} returned {}", method, uri, response.status_code)
        return response

    async def get(self, uri: str) -> httpx.Response:
        return await self.request("GET", uri)

    async def post(self, uri: str, *, body: str | None = None) -> httpx.Response:
        return await self.request("POST", uri, body=body)

    async def put(self, uri: str, *, body: str | None = None) -> httpx.Response:
        return await self.request("PUT", uri, body=body)

    async def patch(self, uri: str, *, body: str | None = None) -> httpx.Response:
        return await self.request("PATCH", uri, body=body)

    async def delete(self, uri: str, *, body: str | None = None) -> httpx.Response:
        return await self.request("DELETE", uri, body=body)
