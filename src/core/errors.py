"""Errores tipados del Core.

Cada fallo de configuración, validación, descarga o API se reporta con su
propia clase para que la CLI y el servidor MCP puedan distinguirlos.
"""

from __future__ import annotations

from typing import Any


class PlantNetError(Exception):
    """Base de todos los errores de plantnet-tools."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(PlantNetError):
    """Credencial ausente o vacía."""


class ValidationError(PlantNetError, ValueError):
    """Petición o argumentos de herramienta mal formados."""


class FetchError(PlantNetError):
    """No se pudo descargar una de las imágenes de la petición."""

    def __init__(self, url: str, status_code: int | None, reason: str) -> None:
        self.url = url
        self.status_code = status_code
        self.reason = reason
        status = f"{status_code} {reason}" if status_code is not None else reason
        super().__init__(
            f"Failed to fetch image at {url}: {status}",
            details={"url": url, "status_code": status_code, "reason": reason},
        )


class UpstreamError(PlantNetError):
    """El servicio de Pl@ntNet respondió con un estado de error."""

    def __init__(self, status_code: int | None, body: str) -> None:
        self.status_code = status_code
        self.body = body
        prefix = f"PlantNet API error {status_code}" if status_code is not None else "PlantNet API unreachable"
        super().__init__(
            f"{prefix}: {body}",
            details={"status_code": status_code, "body": body},
        )


class UnknownToolError(PlantNetError, LookupError):
    """Nombre de herramienta fuera del conjunto cerrado."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}", details={"name": name})
