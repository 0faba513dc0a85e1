"""Regression tests for the Acme SaaS scenario -- guards against calculation drift."""

import pytest

from revintel.engine.calculator import MetricCalculator, summarize
from revintel.extraction.processor import DataProcessor
from revintel.models.enums import Archetype, QualityTier
from revintel.synthesis.bundle import ReportBundle
from revintel.synthesis.report import render_report


class TestAcmeSaaSRegression:
    """Regression baselines for Acme-like inputs with defaulted deal figures."""

    def _run(self, acme_raw):
        data = DataProcessor().validate_and_enhance(acme_raw)
        return data, MetricCalculator().calculate(data)

    def test_extraction_baseline(self, acme_raw):
        data, _ = self._run(acme_raw)
        assert data.parsed.team_members == ("Doug", "Kevin", "CEO", "VP")
        assert data.parsed.sales_cycle_months == 8
        assert data.parsed.defaulted_fields == ("avg_deal_size", "monthly_deals", "conversion_rate")
        assert data.validation.quality_tier == QualityTier.HIGH
        assert not data.validation.requires_manual_review

    def test_current_and_target_state(self, acme_raw):
        _, metrics = self._run(acme_raw)
        assert metrics.benchmarks.archetype == Archetype.SAAS
        assert metrics.current.monthly_revenue == pytest.approx(25_000)
        assert metrics.current.total_cost_monthly == pytest.approx(64_575)
        assert metrics.target.conversion_rate == pytest.approx(0.15)
        assert metrics.target.sales_cycle_months == pytest.approx(4.8)
        assert metrics.target.monthly_revenue == pytest.approx(46_875)

    def test_improvement_baseline(self, acme_raw):
        _, metrics = self._run(acme_raw)
        assert metrics.improvement.revenue_lift == pytest.approx(21_875)
        assert metrics.improvement.cost_reduction == pytest.approx(25_830)

    def test_roi_baseline(self, acme_raw):
        _, metrics = self._run(acme_raw)
        roi = metrics.roi
        assert roi.total_investment == pytest.approx(8_400)
        assert roi.annual_return == pytest.approx(515_214)
        assert roi.year_one_roi == pytest.approx(60.435)
        assert roi.three_year_roi == pytest.approx(183.105)
        assert roi.irr == pytest.approx(1.8)
        assert (roi.break_even_month, roi.payback_months) == (1, 1)

    def test_summary_line(self, acme_raw):
        _, metrics = self._run(acme_raw)
        assert summarize(metrics).startswith(
            "Archetype: SAAS, Revenue lift: $21,875/mo, Payback: 1 months, 3yr ROI:"
        )

    def test_report_figures(self, acme_raw):
        data, metrics = self._run(acme_raw)
        _, document = render_report(ReportBundle(data=data, metrics=metrics))
        assert "**Investment:** $8,400" in document
        assert "[METRIC:Monthly Revenue Gain:$21,875]" in document
        assert "**Total hidden cost: $64,575/month**" in document
