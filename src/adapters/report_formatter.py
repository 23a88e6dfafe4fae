"""Render de reportes en Markdown.

Por qué está en adapters:
- El formato de salida (plantillas Jinja2) es un detalle de presentación.
- El Core solo conoce `IdentificationResult` y `ProjectDirectory`.

Las funciones son puras: sin I/O más allá de leer las plantillas, y el orden
de los candidatos es el recibido del servicio (no se reordena por score).
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from core.domain.models import IdentificationResult, ProjectDirectory

_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

QUOTA_GUIDE = "\n".join(
    [
        "## Pl@ntNet API Quota Information",
        "",
        "**Free tier limit:** 500 identifications per day per API key.",
        "",
        "The exact number of remaining requests for today is returned in every `identify_plant` response "
        "as the `remainingIdentificationRequests` field.",
        "",
        "To check your current quota, make any `identify_plant` request and note the value shown in:",
        "  **Remaining daily quota:** N requests",
        "",
        "If you exceed the daily limit, the API returns a 429 Too Many Requests error.",
        "",
        "To increase your quota, visit: https://my.plantnet.org/account/settings",
    ]
)


@lru_cache(maxsize=1)
def _get_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_identification(result: IdentificationResult) -> str:
    """Resumen legible de una identificación.

    Orden fijo: mejor coincidencia, cuota restante, versión del motor y un
    bloque por candidato (rango, nombre sin autor, % de confianza con un
    decimal, autor, familia, género, hasta 3 nombres comunes, IDs GBIF/POWO),
    seguido de un consejo final.
    """

    template = _get_env().get_template("identification.md.j2")
    return template.render(result=result).rstrip()


def render_projects(directory: ProjectDirectory) -> str:
    """Tabla Markdown `| Project ID | Name |` en el orden recibido."""

    template = _get_env().get_template("projects.md.j2")
    return template.render(rows=directory.rows()).rstrip()
