"""Cliente asíncrono de la API de Pl@ntNet.

Responsabilidad:
- Validar la forma de la petición antes de cualquier I/O.
- Descargar cada imagen y armar el multipart (imágenes + órganos emparejados
  por posición).
- Llamar a `/v2/identify/{project}` y `/v2/projects` y normalizar éxito/error
  como modelos del dominio o excepciones tipadas.

No hay reintentos: cualquier fallo de red o validación es terminal.
"""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator
from urllib.parse import quote

import httpx
from pydantic import ValidationError as SchemaError

from adapters.http_client import build_async_client
from core.config import AppSettings, load_settings, require_api_key
from core.domain.models import (
    MAX_IMAGES,
    IdentificationRequest,
    IdentificationResult,
    ProjectDirectory,
)
from core.errors import ConfigurationError, FetchError, UpstreamError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_TYPE = "image/jpeg"


@dataclass(frozen=True)
class DownloadedImage:
    """Bytes de una imagen y el tipo de contenido inferido."""

    index: int
    content: bytes
    content_type: str

    @property
    def filename(self) -> str:
        ext = "png" if "png" in self.content_type else "jpg"
        return f"image{self.index}.{ext}"

    def as_part(self) -> tuple[str, bytes, str]:
        return (self.filename, self.content, self.content_type)


def infer_content_type(header: str | None) -> str:
    """Tipo MIME declarado (sin parámetros) o `image/jpeg` si no hay."""

    if not header:
        return DEFAULT_IMAGE_TYPE
    mime = header.split(";", 1)[0].strip().lower()
    return mime or DEFAULT_IMAGE_TYPE


def _parse_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def _stringify(payload: Any) -> str:
    if isinstance(payload, str):
        return payload
    return json.dumps(payload, ensure_ascii=False)


class PlantNetClient:
    """Cliente de la API v2 de Pl@ntNet.

    Si se inyecta `http_client` se reutiliza (y no se cierra); si no, cada
    llamada abre y cierra su propio `httpx.AsyncClient`.
    """

    def __init__(
        self,
        api_key: str,
        *,
        settings: AppSettings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ConfigurationError("PLANTNET_API_KEY is required")
        self._api_key = api_key.strip()
        self._settings = settings or load_settings(api_key=self._api_key)
        self._base_url = self._settings.base_url.rstrip("/")
        self._http_client = http_client

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> "PlantNetClient":
        settings = settings or load_settings()
        return cls(require_api_key(settings), settings=settings, http_client=http_client)

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with build_async_client(self._settings) as client:
            yield client

    @staticmethod
    def validate_request(request: IdentificationRequest) -> None:
        """Comprueba la cardinalidad de imágenes/órganos (sin I/O)."""

        images, organs = len(request.images), len(request.organs)
        if images == 0:
            raise ValidationError("at least one image is required")
        if images != organs:
            raise ValidationError(
                f"image and organ counts must match (got {images} images and {organs} organs)",
                details={"images": images, "organs": organs},
            )
        if images > MAX_IMAGES:
            raise ValidationError(
                f"maximum {MAX_IMAGES} images per request (got {images})",
                details={"images": images},
            )

    def identify_url(self, project: str) -> str:
        return f"{self._base_url}/v2/identify/{quote(project, safe='')}"

    def identify_params(self, request: IdentificationRequest) -> dict[str, str]:
        return {
            "api-key": self._api_key,
            "lang": request.lang,
            "nb-results": str(request.nb_results),
            "include-related-images": "false",
        }

    async def _fetch_image(self, client: httpx.AsyncClient, url: str, index: int) -> DownloadedImage:
        logger.debug("Fetching image %d from %s", index, url)
        try:
            response = await client.get(url, headers={"Accept": "image/*"})
        except httpx.HTTPError as exc:
            raise FetchError(url, None, str(exc) or exc.__class__.__name__) from exc

        if not response.is_success:
            raise FetchError(url, response.status_code, response.reason_phrase)

        content_type = infer_content_type(response.headers.get("content-type"))
        return DownloadedImage(index=index, content=response.content, content_type=content_type)

    async def identify(self, request: IdentificationRequest) -> IdentificationResult:
        """Identifica una planta a partir de 1..5 imágenes.

        Raises:
            ValidationError: cardinalidad inválida (antes de cualquier I/O).
            FetchError: alguna imagen no se pudo descargar (aborta todo).
            UpstreamError: el servicio respondió con un estado no-2xx.
        """

        self.validate_request(request)

        async with self._session() as client:
            # Secuencial: el primer fallo aborta y el orden se conserva.
            images: list[DownloadedImage] = []
            for index, url in enumerate(request.images):
                images.append(await self._fetch_image(client, url, index))

            # El servicio empareja la imagen N con el órgano N por posición:
            # cada imagen va seguida de su órgano.
            files: list[tuple[str, tuple[str | None, bytes, str | None]]] = []
            for image, organ in zip(images, request.organs):
                files.append(("images", image.as_part()))
                files.append(("organs", (None, organ.value.encode(), None)))

            logger.debug(
                "Identifying %d image(s) against project=%s lang=%s nb-results=%d",
                len(images),
                request.project,
                request.lang,
                request.nb_results,
            )
            try:
                response = await client.post(
                    self.identify_url(request.project),
                    params=self.identify_params(request),
                    files=files,
                )
            except httpx.HTTPError as exc:
                raise UpstreamError(None, str(exc) or exc.__class__.__name__) from exc

        payload = _parse_body(response)
        if not response.is_success:
            raise UpstreamError(response.status_code, _stringify(payload))
        if not isinstance(payload, dict):
            raise UpstreamError(response.status_code, f"unexpected response body: {_stringify(payload)}")

        try:
            result = IdentificationResult.model_validate(payload)
        except SchemaError as exc:
            raise UpstreamError(response.status_code, f"unexpected response shape: {exc}") from exc

        logger.debug(
            "Best match %r (%d candidates, %s requests remaining)",
            result.best_match,
            len(result.results),
            result.remaining_requests,
        )
        return result

    async def list_projects(self, lang: str = "en") -> ProjectDirectory:
        """Lista las floras disponibles; el mapa se devuelve sin cambios."""

        url = f"{self._base_url}/v2/projects"
        params = {"api-key": self._api_key, "lang": lang}

        logger.debug("Listing projects lang=%s", lang)
        async with self._session() as client:
            try:
                response = await client.get(url, params=params)
            except httpx.HTTPError as exc:
                raise UpstreamError(None, str(exc) or exc.__class__.__name__) from exc

        if not response.is_success:
            raise UpstreamError(response.status_code, response.reason_phrase)

        try:
            return ProjectDirectory.model_validate(response.json())
        except (ValueError, SchemaError) as exc:
            raise UpstreamError(response.status_code, f"unexpected response body: {exc}") from exc
