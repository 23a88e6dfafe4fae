from __future__ import annotations

import copy

from adapters.report_formatter import QUOTA_GUIDE, render_identification, render_projects
from conftest import IDENTIFY_RESPONSE
from core.domain.models import IdentificationResult, ProjectDirectory


def _candidate(name: str, score: float, **species) -> dict:
    return {
        "score": score,
        "species": {
            "scientificNameWithoutAuthor": name,
            "genus": {"scientificNameWithoutAuthor": name.split()[0]},
            "family": {"scientificNameWithoutAuthor": "Rosaceae"},
            **species,
        },
    }


def _result(**overrides) -> IdentificationResult:
    payload = copy.deepcopy(IDENTIFY_RESPONSE)
    payload.update(overrides)
    return IdentificationResult.model_validate(payload)


def test_renders_the_full_report():
    expected = "\n".join(
        [
            "## Plant Identification Results",
            "",
            "**Best match:** Quercus robur L.",
            "**Remaining daily quota:** 450 requests",
            "**AI engine version:** 2.1",
            "",
            "### Top 1 Species Matches",
            "",
            "**1. Quercus robur** — 92.0% confidence",
            "   - Author: L.",
            "   - Family: Fagaceae",
            "   - Genus: Quercus",
            "   - Common names: English oak, pedunculate oak",
            "   - GBIF ID: 2878688",
            "   - POWO ID: 490509-1",
            "",
            "---",
            "*Tip: For better accuracy, use clear photos of a single plant part and specify the correct organ.*",
        ]
    )
    assert render_identification(_result()) == expected


def test_candidates_keep_the_received_order():
    result = _result(
        results=[
            _candidate("Rosa canina", 0.12),
            _candidate("Rubus idaeus", 0.81),
        ]
    )
    text = render_identification(result)

    assert text.index("**1. Rosa canina** — 12.0% confidence") < text.index("**2. Rubus idaeus** — 81.0% confidence")


def test_missing_fields_fall_back():
    text = render_identification(_result(results=[_candidate("Rosa canina", 0.5)]))

    assert "   - Author: unknown" in text
    assert "   - Common names: none known" in text
    assert "GBIF ID" not in text
    assert "POWO ID" not in text


def test_common_names_are_capped_at_three():
    names = ["dog rose", "briar", "wild rose", "eglantine"]
    text = render_identification(_result(results=[_candidate("Rosa canina", 0.5, commonNames=names)]))

    assert "   - Common names: dog rose, briar, wild rose" in text
    assert "eglantine" not in text


def test_confidence_is_rounded_to_one_decimal():
    text = render_identification(_result(results=[_candidate("Rosa canina", 0.87654)]))

    assert "87.7% confidence" in text


def test_unknown_quota():
    payload = copy.deepcopy(IDENTIFY_RESPONSE)
    del payload["remainingIdentificationRequests"]
    text = render_identification(IdentificationResult.model_validate(payload))

    assert "**Remaining daily quota:** unknown requests" in text


def test_renders_the_projects_table():
    directory = ProjectDirectory.model_validate(
        {
            "weurope": {"id": "weurope", "name": "Western Europe"},
            "useful": {"title": "Useful plants"},
        }
    )
    lines = render_projects(directory).splitlines()

    assert lines[0] == "## Available Pl@ntNet Flora Projects"
    assert lines[-2:] == ["| `weurope` | Western Europe |", "| `useful` | Useful plants |"]


def test_quota_guide_mentions_the_daily_limit():
    assert "500 identifications per day" in QUOTA_GUIDE
    assert "remainingIdentificationRequests" in QUOTA_GUIDE
