"""CLI `plantnet-tools` (Typer + Rich)."""
