"""Core de plantnet-tools: dominio, configuración, errores y servicios.

El Core no conoce la CLI ni el transporte MCP.
"""
