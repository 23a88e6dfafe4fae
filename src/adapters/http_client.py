"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts y headers para todas las llamadas salientes.
- Facilita testeo: se puede inyectar un `httpx.AsyncClient` con un transporte
  simulado (`httpx.MockTransport`).
"""

from __future__ import annotations

import httpx

from core.config import AppSettings, load_settings


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con los defaults de la aplicación.

    Sin `http_timeout_seconds` configurado no se aplica timeout: quien llama
    impone su propio deadline.
    """

    settings = settings or load_settings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
