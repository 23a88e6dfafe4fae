"""Registro de herramientas expuestas al host del asistente.

Cada herramienta es un `ToolSpec` (nombre, descripción, modelo de argumentos
y handler tipado) y `ToolRegistry.dispatch` la resuelve por nombre. El
conjunto de nombres es cerrado (`ToolName`): un nombre desconocido falla con
`UnknownToolError` y unos argumentos inválidos con `ValidationError`, siempre
antes de tocar la red.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Awaitable, Callable, Mapping

from pydantic import BaseModel, ConfigDict, Field, HttpUrl
from pydantic import ValidationError as SchemaError

from adapters.report_formatter import QUOTA_GUIDE, render_identification, render_projects
from core.domain.models import MAX_IMAGES, MAX_RESULTS, IdentificationRequest
from core.domain.organ import Organ
from core.errors import UnknownToolError, ValidationError
from core.interfaces.identifier import PlantIdentifier

logger = logging.getLogger(__name__)


class ToolName(str, Enum):
    IDENTIFY_PLANT = "identify_plant"
    LIST_PROJECTS = "list_projects"
    CHECK_QUOTA = "check_quota"


# Tipos anotados compartidos con el servidor MCP: el esquema publicado al
# host es el mismo que valida `dispatch`.
ImageUrls = Annotated[
    list[HttpUrl],
    Field(
        min_length=1,
        max_length=MAX_IMAGES,
        description=(
            "List of publicly accessible image URLs (JPG or PNG). "
            "Using multiple images of different organs improves identification accuracy. "
            "Maximum 5 images."
        ),
    ),
]
OrganTags = Annotated[
    list[Organ],
    Field(
        min_length=1,
        max_length=MAX_IMAGES,
        description=(
            "Plant organ shown in each image. Must have the same count as image_urls. "
            '"leaf", "flower", "fruit", "bark" are specific organ types. '
            '"habit" is the whole plant. '
            '"auto" lets PlantNet detect automatically. '
            '"other" is an unclassified plant part.'
        ),
    ),
]
ProjectId = Annotated[
    str,
    Field(
        min_length=1,
        description=(
            'Flora database to search. "all" (default) searches the global database. '
            'Use a regional project ID (e.g. "weurope" for Western Europe) for higher accuracy '
            "when you know the plant's geographic origin. "
            "Use the list_projects tool to discover available projects."
        ),
    ),
]
NamesLanguage = Annotated[
    str,
    Field(
        min_length=1,
        description=(
            "Language code for common names in results. "
            'Examples: "en" (English), "fr" (French), "es" (Spanish), "de" (German). Default: "en".'
        ),
    ),
]
ResultCount = Annotated[
    int,
    Field(
        ge=1,
        le=MAX_RESULTS,
        description=(
            "Number of species results to return (1-25). "
            "Higher values give more alternatives but the top result is usually most accurate. Default: 5."
        ),
    ),
]
ProjectsLanguage = Annotated[
    str,
    Field(min_length=1, description='Language for project names in the response. Default: "en".'),
]


class IdentifyPlantArgs(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    image_urls: ImageUrls
    organs: OrganTags
    project: ProjectId = "all"
    lang: NamesLanguage = "en"
    nb_results: ResultCount = 5

    def to_request(self) -> IdentificationRequest:
        return IdentificationRequest(
            images=tuple(str(url) for url in self.image_urls),
            organs=tuple(self.organs),
            project=self.project,
            lang=self.lang,
            nb_results=self.nb_results,
        )


class ListProjectsArgs(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    lang: ProjectsLanguage = "en"


class CheckQuotaArgs(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


IDENTIFY_PLANT_DESCRIPTION = (
    "Identify plant species from one or more photos using the Pl@ntNet AI. "
    "Provide image URLs and specify which plant organ appears in each photo. "
    "Returns ranked species matches with confidence scores, scientific and common names, "
    "taxonomic classification (genus, family), GBIF and POWO identifiers, "
    "and remaining daily API quota. Supports up to 5 images per request for improved accuracy. "
    "Example: identify a rose from a flower photo, or an oak from a leaf photo."
)
LIST_PROJECTS_DESCRIPTION = (
    "List all available Pl@ntNet flora databases (called projects or referentials). "
    "Each project covers a specific geographic region or taxonomic group. "
    'Use the project ID from this list as the "project" argument in identify_plant '
    "for more accurate region-specific identification. "
    'For example, if you know a plant is from Western Europe, use the "weurope" project.'
)
CHECK_QUOTA_DESCRIPTION = (
    "Get information about Pl@ntNet API rate limits and quota. "
    "The free Pl@ntNet API allows 500 identifications per day per API key. "
    "The exact remaining count for today is returned as part of every identify_plant response. "
    "Use this tool when you need to understand quota constraints before batch processing."
)


Handler = Callable[[Any], Awaitable[str]]


@dataclass(frozen=True)
class ToolSpec:
    name: ToolName
    description: str
    args_model: type[BaseModel]
    handler: Handler

    def input_schema(self) -> dict[str, Any]:
        return self.args_model.model_json_schema()


class ToolRegistry:
    """Tabla de despacho `ToolName -> ToolSpec`."""

    def __init__(self, identifier: PlantIdentifier) -> None:
        self._identifier = identifier
        specs = (
            ToolSpec(
                name=ToolName.IDENTIFY_PLANT,
                description=IDENTIFY_PLANT_DESCRIPTION,
                args_model=IdentifyPlantArgs,
                handler=self._identify_plant,
            ),
            ToolSpec(
                name=ToolName.LIST_PROJECTS,
                description=LIST_PROJECTS_DESCRIPTION,
                args_model=ListProjectsArgs,
                handler=self._list_projects,
            ),
            ToolSpec(
                name=ToolName.CHECK_QUOTA,
                description=CHECK_QUOTA_DESCRIPTION,
                args_model=CheckQuotaArgs,
                handler=self._check_quota,
            ),
        )
        self._tools: dict[ToolName, ToolSpec] = {spec.name: spec for spec in specs}

    def specs(self) -> list[ToolSpec]:
        return list(self._tools.values())

    def get(self, name: str) -> ToolSpec:
        try:
            return self._tools[ToolName(name)]
        except ValueError as exc:
            raise UnknownToolError(name) from exc

    async def dispatch(self, name: str, arguments: Mapping[str, Any] | None = None) -> str:
        spec = self.get(name)
        try:
            args = spec.args_model.model_validate(dict(arguments or {}))
        except SchemaError as exc:
            raise ValidationError(
                f"Invalid arguments for {spec.name.value}: {exc}",
                details={"errors": exc.errors(include_url=False)},
            ) from exc

        logger.debug("Dispatching tool %s", spec.name.value)
        return await spec.handler(args)

    async def _identify_plant(self, args: IdentifyPlantArgs) -> str:
        result = await self._identifier.identify(args.to_request())
        return render_identification(result)

    async def _list_projects(self, args: ListProjectsArgs) -> str:
        directory = await self._identifier.list_projects(args.lang)
        return render_projects(directory)

    async def _check_quota(self, args: CheckQuotaArgs) -> str:
        # No hay endpoint de cuota: la cifra real llega en cada identify.
        return QUOTA_GUIDE
