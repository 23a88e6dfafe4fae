from __future__ import annotations

import copy
from typing import Any, Callable

import httpx
import pytest

from adapters.plantnet_client import PlantNetClient
from core.config import AppSettings

FAKE_KEY = "test-api-key"
API_HOST = "my-api.plantnet.org"

IDENTIFY_RESPONSE: dict[str, Any] = {
    "query": {
        "project": "all",
        "images": ["img1"],
        "organs": ["leaf"],
        "includeRelatedImages": False,
    },
    "language": "en",
    "preferedReferential": "all",
    "bestMatch": "Quercus robur L.",
    "results": [
        {
            "score": 0.92,
            "species": {
                "scientificNameWithoutAuthor": "Quercus robur",
                "scientificNameAuthorship": "L.",
                "scientificName": "Quercus robur L.",
                "genus": {"scientificNameWithoutAuthor": "Quercus"},
                "family": {"scientificNameWithoutAuthor": "Fagaceae"},
                "commonNames": ["English oak", "pedunculate oak"],
            },
            "gbif": {"id": "2878688"},
            "powo": {"id": "490509-1"},
        },
    ],
    "remainingIdentificationRequests": 450,
    "version": "2.1",
}


class RecordingTransport:
    """Transporte simulado: imágenes por host, API de Pl@ntNet por `API_HOST`."""

    def __init__(
        self,
        *,
        image_status: int = 200,
        image_type: str | None = "image/jpeg",
        api_status: int = 200,
        api_body: Any = None,
        failing_images: set[str] | None = None,
    ) -> None:
        self.image_status = image_status
        self.image_type = image_type
        self.api_status = api_status
        self.api_body = copy.deepcopy(IDENTIFY_RESPONSE) if api_body is None else api_body
        self.failing_images = failing_images or set()
        self.requests: list[httpx.Request] = []

    @property
    def api_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == API_HOST]

    @property
    def image_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host != API_HOST]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == API_HOST:
            return httpx.Response(self.api_status, json=self.api_body)

        if str(request.url) in self.failing_images:
            return httpx.Response(404)
        headers = {"content-type": self.image_type} if self.image_type else {}
        return httpx.Response(self.image_status, content=b"fake-image-data", headers=headers)


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> AppSettings:
    for name in ("PLANTNET_API_KEY", "PLANTNET_KEY", "PLANTNET_BASE_URL", "PLANTNET_HTTP_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    return AppSettings(api_key=FAKE_KEY, _env_file=None)


@pytest.fixture
def make_client(settings: AppSettings) -> Callable[[RecordingTransport], PlantNetClient]:
    def _make(transport: RecordingTransport) -> PlantNetClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(transport))
        return PlantNetClient(FAKE_KEY, settings=settings, http_client=http_client)

    return _make
