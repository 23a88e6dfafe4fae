"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- Los aliases reproducen el JSON de Pl@ntNet (camelCase) mientras el código
  Python usa snake_case.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
- Todos son inmutables (`frozen=True`).
"""

from __future__ import annotations

from typing import Any, Iterator

from pydantic import BaseModel, Field, RootModel, model_validator
from pydantic.config import ConfigDict

from core.domain.organ import Organ

MAX_IMAGES = 5
MAX_RESULTS = 25


class IdentificationRequest(BaseModel):
    """Petición de identificación: imágenes y órganos emparejados por posición.

    Los invariantes de cardinalidad (1..5, misma longitud) los verifica el
    cliente para devolver `ValidationError` antes de cualquier I/O.
    """

    model_config = ConfigDict(frozen=True)

    images: tuple[str, ...] = Field(
        ...,
        description="URLs de las imágenes, en el mismo orden que `organs`.",
    )
    organs: tuple[Organ, ...] = Field(
        ...,
        description="Órgano visible en cada imagen (emparejado por índice).",
    )
    project: str = Field(
        default="all",
        min_length=1,
        description="Flora/referencial a consultar ('all' = base global).",
    )
    lang: str = Field(
        default="en",
        min_length=1,
        description="Idioma de los nombres comunes.",
    )
    nb_results: int = Field(
        default=5,
        ge=1,
        le=MAX_RESULTS,
        description="Número máximo de especies candidatas.",
    )


class TaxonName(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    scientific_name_without_author: str = Field(
        ...,
        alias="scientificNameWithoutAuthor",
        description="Nombre científico sin autoría.",
    )
    scientific_name_authorship: str | None = Field(
        default=None,
        alias="scientificNameAuthorship",
    )
    scientific_name: str | None = Field(
        default=None,
        alias="scientificName",
    )


class Species(TaxonName):
    """Especie candidata con su clasificación (género/familia)."""

    genus: TaxonName = Field(..., description="Género de la especie.")
    family: TaxonName = Field(..., description="Familia de la especie.")
    common_names: list[str] = Field(
        default_factory=list,
        alias="commonNames",
        description="Nombres comunes en el idioma pedido.",
    )


class ExternalReference(BaseModel):
    """Identificador en un registro externo (GBIF, POWO, IUCN)."""

    model_config = ConfigDict(extra="allow", frozen=True)

    id: str | int = Field(..., description="Identificador en el registro.")


class Candidate(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    score: float = Field(..., description="Confianza (0..1) tal como la envía el servicio.")
    species: Species
    gbif: ExternalReference | None = None
    powo: ExternalReference | None = None
    iucn: ExternalReference | None = None


class IdentificationResult(BaseModel):
    """Respuesta de `/v2/identify` sin transformar valores numéricos.

    `extra="allow"` conserva cualquier campo nuevo del servicio, de modo que
    `model_dump(by_alias=True, exclude_unset=True)` devuelve el payload original.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    best_match: str = Field(..., alias="bestMatch")
    results: list[Candidate] = Field(
        default_factory=list,
        description="Candidatos ya ordenados por el servicio.",
    )
    remaining_requests: int | None = Field(
        default=None,
        alias="remainingIdentificationRequests",
        description="Cuota diaria restante para la API key.",
    )
    version: str | None = Field(default=None, description="Versión del motor IA.")
    query: dict[str, Any] | None = None
    language: str | None = None
    prefered_referential: str | None = Field(default=None, alias="preferedReferential")


class ProjectDirectory(RootModel[dict[str, Any]]):
    """Mapa `project_id -> metadata` devuelto por `/v2/projects`.

    Un mapa se conserva tal cual, sea cual sea el tipo de sus valores. Si el
    servicio responde con una lista, cada entrada se indexa por su `id`; las
    entradas sin `id` se indexan por su posición en la lista.
    """

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def index_project_list(cls, data: Any) -> Any:
        if isinstance(data, list):
            indexed: dict[str, Any] = {}
            for position, entry in enumerate(data):
                project_id = entry.get("id") if isinstance(entry, dict) else None
                key = str(project_id) if project_id is not None else str(position)
                indexed.setdefault(key, entry)
            return indexed
        return data

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __getitem__(self, project_id: str) -> Any:
        return self.root[project_id]

    def rows(self) -> list[tuple[str, str]]:
        """Pares `(id, nombre)` para mostrar, en el orden recibido."""

        out: list[tuple[str, str]] = []
        for key, info in self.root.items():
            if not isinstance(info, dict):
                out.append((key, str(info) if info not in (None, "") else key))
                continue
            project_id = info.get("id") or key
            name = info.get("name") or info.get("title") or key
            out.append((str(project_id), str(name)))
        return out
