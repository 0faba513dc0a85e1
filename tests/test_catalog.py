"""Tests for the interview option catalog."""

import json

import pytest
from pydantic import ValidationError

from revintel.catalog.loader import get_default_catalog, load_catalog


def _write_catalog(tmp_path, icps, challenges, defaults=("lead_management",)):
    (tmp_path / "icp_definitions.json").write_text(json.dumps({
        "version": "test",
        "default_challenge_area_ids": list(defaults),
        "icps": icps,
    }))
    (tmp_path / "challenge_areas.json").write_text(json.dumps({
        "version": "test",
        "challenge_areas": challenges,
    }))


def _challenge(area_id="lead_management"):
    return {
        "id": area_id,
        "label": "Lead Management",
        "metrics": [{
            "id": "lead_qualification",
            "label": "Lead Qualification",
            "quantification_prompts": {"baseline": "How many?", "friction": "What slows it?"},
        }],
    }


def _icp(icp_id="agencies", relevant=None):
    area = {
        "id": "web",
        "label": "Web Builds",
        "revenue_model_suggestions": ["Fixed fee"],
    }
    if relevant is not None:
        area["relevant_challenge_areas"] = relevant
    return {"id": icp_id, "label": "Agencies", "opportunity_areas": [area]}


class TestDefaultCatalog:

    def test_shape(self):
        catalog = get_default_catalog()
        assert len(catalog.icps) == 6
        assert len(catalog.challenge_areas) == 4
        for icp in catalog.icps:
            assert len(icp.opportunity_areas) == 4
            for area in icp.opportunity_areas:
                assert len(area.revenue_model_suggestions) >= 1

    def test_metrics_have_prompts(self):
        for area in get_default_catalog().challenge_areas:
            assert 4 <= len(area.metrics) <= 5
            for metric in area.metrics:
                assert metric.quantification_prompts.baseline
                assert metric.quantification_prompts.friction

    def test_lookups(self):
        catalog = get_default_catalog()
        icp = catalog.get_icp("custom_development_agencies")
        assert icp.label == "Custom Development Agencies"
        assert icp.get_opportunity_area("saas_product_development") is not None
        assert catalog.get_icp("missing") is None
        assert catalog.get_challenge_area(None) is None

    def test_cached(self):
        assert get_default_catalog() is get_default_catalog()


class TestLoadCatalog:

    def test_loads_custom_directory(self, tmp_path):
        _write_catalog(tmp_path, [_icp()], [_challenge()])
        catalog = load_catalog(tmp_path)
        assert catalog.icps[0].id == "agencies"

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_catalog(tmp_path)

    def test_unknown_challenge_reference_rejected(self, tmp_path):
        _write_catalog(tmp_path, [_icp(relevant=["nonexistent"])], [_challenge()])
        with pytest.raises(ValidationError):
            load_catalog(tmp_path)

    def test_duplicate_icp_ids_rejected(self, tmp_path):
        _write_catalog(tmp_path, [_icp(), _icp()], [_challenge()])
        with pytest.raises(ValidationError):
            load_catalog(tmp_path)

    def test_area_without_revenue_models_rejected(self, tmp_path):
        icp = _icp()
        icp["opportunity_areas"][0]["revenue_model_suggestions"] = []
        _write_catalog(tmp_path, [icp], [_challenge()])
        with pytest.raises(ValidationError):
            load_catalog(tmp_path)

    def test_relevant_areas_restrict_challenges(self, tmp_path):
        _write_catalog(
            tmp_path,
            [_icp(relevant=["account_management"])],
            [_challenge(), _challenge("account_management")],
        )
        catalog = load_catalog(tmp_path)
        area = catalog.icps[0].opportunity_areas[0]
        assert [c.id for c in catalog.challenge_areas_for(area)] == ["account_management"]
