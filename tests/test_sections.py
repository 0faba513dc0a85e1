"""Tests for the individual report section renderers."""

import re
from dataclasses import replace

from revintel.models.research import ResearchResult
from revintel.synthesis import sections
from revintel.synthesis.bundle import ReportBundle


class TestExecutiveSummary:

    def test_wrapped_and_specific(self, acme_bundle):
        text = sections.executive_summary(acme_bundle)
        assert text.startswith("[EXEC_SUMMARY]")
        assert text.endswith("[/EXEC_SUMMARY]")
        assert "Acme SaaS Co converts only 8% of leads and takes 8 months to close deals" in text
        assert "Doug, Kevin, CEO and VP manually nurturing every lead" in text
        assert "$262,500 in annual revenue on the table" in text
        assert "Your sales process has 4 handoffs" in text
        assert "48% of prospects have gone cold" in text

    def test_investment_block(self, acme_bundle):
        text = sections.executive_summary(acme_bundle)
        assert "**Investment:** $8,400" in text
        assert "**Payback:** 30 days" in text
        assert "**12-Month ROI:**" in text

    def test_payback_not_reached(self, acme_bundle):
        roi = replace(acme_bundle.metrics.roi, payback_months=None, break_even_month=None)
        bundle = ReportBundle(data=acme_bundle.data, metrics=replace(acme_bundle.metrics, roi=roi))
        text = sections.executive_summary(bundle)
        assert "**Payback:** not reached at current projections" in text
        assert "inf days" not in text


class TestCurrentState:

    def test_highlight_block(self, acme_bundle):
        text = sections.current_state(acme_bundle)
        assert "[HIGHLIGHT]" in text and "[/HIGHLIGHT]" in text
        assert "**4 People Touch Every Deal**" in text
        assert "Doug -> Kevin -> CEO -> VP" in text
        assert "0.85^4 = Only 52% of qualified opportunities survive to proposal" in text

    def test_hidden_costs_and_strengths(self, acme_bundle):
        text = sections.current_state(acme_bundle)
        assert "40 hours/week x $150/hour = $312,000/year" in text
        assert "20 hours/week wasted = $104,000/year" in text
        assert "- Strong team depth with 4 people involved" in text
        assert "**Total hidden cost: $64,575/month**" in text


class TestBenchmarks:

    def test_comparison(self, acme_bundle):
        text = sections.benchmarks(acme_bundle)
        assert text.startswith("## Industry Benchmarks for SaaS")
        assert "Lead capture -> Qualification call -> Product demo" in text
        assert "- Conversion Rate: 8.0%" in text
        assert "- Top Quartile Conversion: 15.0%" in text
        assert "- Best-in-Class Cycle: 2 months" in text
        assert "- Conversion: 47% below benchmark" in text
        assert "- Cycle Time: 300% longer than optimal" in text


class TestSolutions:

    def test_three_columns(self, acme_bundle):
        text = sections.solutions(acme_bundle)
        assert "[SOLUTIONS_START]" in text and "[SOLUTIONS_END]" in text
        assert text.count("[COLUMN]") == 3
        assert text.count("[/COLUMN]") == 3
        assert "### Hybrid Platform" in text

    def test_augmentation_prefers_stack_integrations(self, acme_bundle):
        text = sections.solutions(acme_bundle)
        assert "**Clay.com**" in text
        assert "**GPT-4o-mini**" not in text
        assert "Investment: $149/month" in text
        assert 'removes the "manual" bottleneck' in text

    def test_falls_back_to_top_matches(self, acme_bundle):
        bundle = ReportBundle(
            data=acme_bundle.data,
            metrics=acme_bundle.metrics,
            solutions=(acme_bundle.solutions[1],),
        )
        assert "**GPT-4o-mini**" in sections.solutions(bundle)

    def test_no_solutions(self, acme_bundle):
        bundle = ReportBundle(data=acme_bundle.data, metrics=acme_bundle.metrics)
        assert "No matching tools found." in sections.solutions(bundle)


class TestFutureState:

    def test_framework_and_timeline(self, acme_bundle):
        text = sections.future_state(acme_bundle)
        assert "### Where Each Solution Fits in the Four-Layer Framework" in text
        assert "[TIMELINE]" in text and "[/TIMELINE]" in text
        assert "4.8 months average cycle" in text
        assert "your 48% opportunity loss rate" in text


class TestROI:

    def test_metric_rows(self, acme_bundle):
        text = sections.roi(acme_bundle)
        rows = re.findall(r"\[METRIC:([^:\]]+):([^\]]+)\]", text)
        labels = [label for label, _ in rows]
        assert labels == [
            "Current State Baseline",
            "Improvement Target",
            "Monthly Revenue Gain",
            "Annual Impact",
            "Total Investment",
            "Payback Period",
            "12-Month ROI",
            "3-Year ROI",
        ]
        values = dict(rows)
        assert values["Current State Baseline"] == "$25,000/month"
        assert values["Improvement Target"] == "15.0% conversion"
        assert values["Monthly Revenue Gain"] == "$21,875"
        assert values["Total Investment"] == "$8,400"
        assert values["Payback Period"] == "1 months"

    def test_baseline_explained(self, acme_bundle):
        text = sections.roi(acme_bundle)
        assert "5 deals/month x $5,000 = $25,000/month" in text
        assert "90% confidence factor" in text


class TestMarketContext:

    def test_research_woven_in(self, acme_bundle):
        text = sections.market_context(acme_bundle)
        assert "Rapid adoption of AI lead scoring and Growing use of automated nurture sequences" in text
        assert "**Northwind**" in text
        assert "### Research Findings" in text
        assert "### Sources\n1. https://example.com/ai-sales-report" in text

    def test_without_research(self, acme_bundle):
        bundle = ReportBundle(data=acme_bundle.data, metrics=acme_bundle.metrics)
        text = sections.market_context(bundle)
        assert "AI adoption accelerating across all industries" in text
        assert "Similar SaaS companies are achieving 40-60% improvement" in text
        assert "### Sources" not in text

    def test_case_studies_capped(self, acme_bundle):
        research = ResearchResult(
            narrative_text="x",
            case_studies=[
                {"company": f"Co{i}", "result": "grew revenue"} for i in range(3)
            ],
        )
        bundle = ReportBundle(data=acme_bundle.data, metrics=acme_bundle.metrics, research=research)
        text = sections.market_context(bundle)
        assert "**Co0**" in text and "**Co1**" in text
        assert "**Co2**" not in text


class TestRecommendations:

    def test_cards(self, acme_bundle):
        text = sections.recommendations(acme_bundle)
        assert "[RECOMMENDATION_CARDS]" in text and "[/RECOMMENDATION_CARDS]" in text
        cards = re.findall(r"\[CARD:([^:]+):([^:]+):([^\]]+)\]", text)
        assert [when for when, _, _ in cards] == ["Week 1-2", "Week 3-4", "Week 5-8", "Week 9-12"]
        assert "Train Doug, Kevin, CEO and VP" in text
        assert "using your HubSpot data" in text

    def test_card_fields_cannot_break_markers(self, acme_bundle):
        parsed = replace(acme_bundle.data.parsed, stack_components=("Sales:Force]X",))
        data = replace(acme_bundle.data, parsed=parsed, revenue_challenge="Leads: stuck [in review]")
        text = sections.recommendations(ReportBundle(data=data, metrics=acme_bundle.metrics))

        block = text.split("[RECOMMENDATION_CARDS]\n")[1].split("\n[/RECOMMENDATION_CARDS]")[0]
        lines = block.splitlines()
        assert len(lines) == 4
        for line in lines:
            assert re.fullmatch(r"\[CARD:[^:\[\]]+:[^:\[\]]+:[^:\[\]]+\]", line)
        assert "integration with Sales Force X]" in lines[0]
        assert "Deploy leads stuck in review automation" in lines[1]
