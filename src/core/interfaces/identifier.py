"""Contrato del servicio de identificación.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- El registro de herramientas depende de esta abstracción, no del cliente
  HTTP concreto, así que los tests pueden sustituirlo por un doble.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import IdentificationRequest, IdentificationResult, ProjectDirectory


@runtime_checkable
class PlantIdentifier(Protocol):
    """Contrato mínimo de un servicio de identificación de plantas.

    Reglas de diseño:
    - Ambos métodos son asíncronos porque hacen I/O (HTTP).
    - Los fallos se reportan con las excepciones de `core.errors`.
    """

    async def identify(self, request: IdentificationRequest) -> IdentificationResult:
        """Identifica la especie a partir de las imágenes de `request`."""

        ...

    async def list_projects(self, lang: str = "en") -> ProjectDirectory:
        """Lista las floras (proyectos) disponibles."""

        ...
