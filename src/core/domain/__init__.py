"""Modelos y entidades del dominio.

Por qué:
- Aquí viven las estructuras de datos puras y estrictas (Pydantic v2).
- El dominio no conoce HTTP, CLI, ni SDKs: solo conceptos del problema.
"""

from core.domain.models import (
    Candidate,
    IdentificationRequest,
    IdentificationResult,
    ProjectDirectory,
    Species,
)
from core.domain.organ import Organ

__all__ = [
    "Candidate",
    "IdentificationRequest",
    "IdentificationResult",
    "Organ",
    "ProjectDirectory",
    "Species",
]
