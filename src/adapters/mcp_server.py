"""Servidor MCP (fastmcp) que publica las herramientas del registro.

Cada tool es una función delgada que delega en `ToolRegistry.dispatch`. Sus
parámetros usan los mismos tipos anotados que los modelos de argumentos, así
que el `inputSchema` que ve el host lleva descripciones y límites.
"""

from __future__ import annotations

from fastmcp import FastMCP

from core.services.tool_registry import (
    ImageUrls,
    NamesLanguage,
    OrganTags,
    ProjectId,
    ProjectsLanguage,
    ResultCount,
    ToolName,
    ToolRegistry,
)

SERVER_NAME = "plantnet-tools"


def build_mcp_server(registry: ToolRegistry) -> FastMCP:
    """Crea el `FastMCP` con las tres herramientas registradas."""

    mcp = FastMCP(SERVER_NAME)
    descriptions = {spec.name: spec.description for spec in registry.specs()}

    @mcp.tool(name=ToolName.IDENTIFY_PLANT.value, description=descriptions[ToolName.IDENTIFY_PLANT])
    async def identify_plant(
        image_urls: ImageUrls,
        organs: OrganTags,
        project: ProjectId = "all",
        lang: NamesLanguage = "en",
        nb_results: ResultCount = 5,
    ) -> str:
        return await registry.dispatch(
            ToolName.IDENTIFY_PLANT,
            {
                "image_urls": [str(url) for url in image_urls],
                "organs": organs,
                "project": project,
                "lang": lang,
                "nb_results": nb_results,
            },
        )

    @mcp.tool(name=ToolName.LIST_PROJECTS.value, description=descriptions[ToolName.LIST_PROJECTS])
    async def list_projects(lang: ProjectsLanguage = "en") -> str:
        return await registry.dispatch(ToolName.LIST_PROJECTS, {"lang": lang})

    @mcp.tool(name=ToolName.CHECK_QUOTA.value, description=descriptions[ToolName.CHECK_QUOTA])
    async def check_quota() -> str:
        return await registry.dispatch(ToolName.CHECK_QUOTA, {})

    return mcp
