"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (cliente Pl@ntNet, servidor MCP) lean config de
  forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.errors import ConfigurationError

API_KEY_ENV = "PLANTNET_API_KEY"
LEGACY_API_KEY_ENV = "PLANTNET_KEY"


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "plantnet-tools"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "plantnet-tools"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "plantnet-tools"
    return Path.home() / ".config" / "plantnet-tools"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str]) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# plantnet-tools user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    La credencial acepta el nombre principal (`PLANTNET_API_KEY`) y el
    nombre heredado (`PLANTNET_KEY`).
    """

    model_config = SettingsConfigDict(
        env_prefix="PLANTNET_",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(API_KEY_ENV, LEGACY_API_KEY_ENV),
        description="API key de Pl@ntNet (https://my.plantnet.org/).",
    )
    base_url: str = Field(
        default="https://my-api.plantnet.org",
        min_length=8,
        description="Base URL del servicio de identificación.",
    )
    http_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Timeout por request (segundos). Sin valor: sin timeout.",
    )
    user_agent: str = Field(
        default="plantnet-tools/0.1",
        min_length=1,
        description="User-Agent para las peticiones salientes.",
    )


def load_settings(**overrides: object) -> AppSettings:
    """Carga la configuración leyendo también el `.env` global del usuario.

    La ruta del `.env` de usuario se resuelve en cada llamada, de modo que
    `XDG_CONFIG_HOME` (o `APPDATA`) se respeta aunque cambie en tiempo de
    ejecución.
    """

    # Orden: proyecto primero (dev), luego config global de usuario.
    return AppSettings(_env_file=(".env", str(get_user_env_file())), **overrides)  # type: ignore[arg-type]


def require_api_key(settings: AppSettings | None = None) -> str:
    """Devuelve la API key configurada o falla con un mensaje accionable."""

    settings = settings or load_settings()
    api_key = (settings.api_key or "").strip()
    if not api_key:
        raise ConfigurationError(
            f"{API_KEY_ENV} environment variable is required. "
            "Get your free API key at https://my.plantnet.org/",
            details={"variables": [API_KEY_ENV, LEGACY_API_KEY_ENV]},
        )
    return api_key
