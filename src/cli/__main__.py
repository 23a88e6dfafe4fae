"""Permite `python -m cli ...` con el paquete instalado."""

from cli.main import run

run()
