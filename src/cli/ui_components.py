"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import ProjectDirectory
from core.errors import PlantNetError


def build_projects_table(directory: ProjectDirectory) -> Table:
    """Tabla Rich con los proyectos (floras) disponibles."""

    table = Table(title="Pl@ntNet Flora Projects")
    table.add_column("Project ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    for project_id, name in directory.rows():
        table.add_row(project_id, name)
    return table


def build_report_panel(markdown: str, *, title: str = "Identification") -> Panel:
    """Panel con un reporte Markdown ya renderizado."""

    return Panel(Markdown(markdown), title=Text(title, style="bold green"), border_style="green")


def print_error(console: Console, error: PlantNetError) -> None:
    console.print(f"[bold red]{error.__class__.__name__}:[/bold red] {escape(error.message)}")
