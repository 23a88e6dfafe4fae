"""Adaptadores de infraestructura (HTTP, render de reportes, servidor MCP)."""
