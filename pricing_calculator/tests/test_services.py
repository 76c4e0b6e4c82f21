"""
Tests: Insight and lead services.

Run with:
    pytest pricing_calculator/tests/test_services.py -v
"""

from datetime import datetime, timedelta, timezone

import pytest
from pricing_calculator.engine import calculate, validate
from pricing_calculator.models.enums import AnalysisType
from pricing_calculator.models.schemas import NarrativeInsight, NarrativeInsightList
from pricing_calculator.services import InsightService, InvalidEmailError, LeadService
from pricing_calculator.services import llm_service


def _report(**overrides):
    payload = {
        "currentPrice": 99,
        "customers": 100,
        "churnRate": 5,
        "competitorPrice": 120,
        "cac": 300,
        "features": 3,
        "growthRate": 10,
    }
    payload.update(overrides)
    return calculate(validate(payload))


class FakeClock:
    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now


class TestInsightFallback:
    def test_comprehensive_covers_three_areas(self):
        service = InsightService(mock_mode=True)
        insights = service.generate(_report())
        assert [i.type for i in insights] == [
            AnalysisType.PRICING,
            AnalysisType.COMPETITIVE,
            AnalysisType.MARKET,
        ]

    def test_single_type(self):
        service = InsightService(mock_mode=True)
        insights = service.generate(_report(), AnalysisType.MARKET)
        assert len(insights) == 1
        assert "net growth" in insights[0].description

    def test_no_competitor_price(self):
        service = InsightService(mock_mode=True)
        insight = service.generate(_report(competitorPrice=None), AnalysisType.COMPETITIVE)[0]
        assert insight.title == "No competitor benchmark"

    def test_mock_mode_never_calls_llm(self, monkeypatch):
        def _boom(*args, **kwargs):
            raise AssertionError("LLM must not be called in mock mode")

        monkeypatch.setattr(llm_service, "llm_json_call", _boom)
        InsightService(mock_mode=True).generate(_report())


class TestInsightLLM:
    def test_llm_result_used_and_cached(self, monkeypatch):
        calls = []

        def _fake_call(system_prompt, prompt, output_model):
            calls.append(prompt)
            assert output_model is NarrativeInsightList
            assert "monthlyPrice" in prompt
            return NarrativeInsightList(insights=[
                NarrativeInsight(id="ai-1", type=AnalysisType.PRICING, title="Raise Starter", description="..."),
            ])

        monkeypatch.setattr(llm_service, "llm_json_call", _fake_call)
        service = InsightService(mock_mode=False, cache_ttl_seconds=60, clock=FakeClock())

        first = service.generate(_report(), AnalysisType.PRICING)
        second = service.generate(_report(), AnalysisType.PRICING)

        assert first[0].title == "Raise Starter"
        assert second == first
        assert len(calls) == 1

    def test_cache_expires(self, monkeypatch):
        calls = []

        def _fake_call(system_prompt, prompt, output_model):
            calls.append(prompt)
            return NarrativeInsightList(insights=[])

        monkeypatch.setattr(llm_service, "llm_json_call", _fake_call)
        clock = FakeClock()
        service = InsightService(mock_mode=False, cache_ttl_seconds=10, clock=clock)

        service.generate(_report(), AnalysisType.PRICING)
        clock.now = 11
        service.generate(_report(), AnalysisType.PRICING)
        assert len(calls) == 2

    def test_cache_is_bounded(self):
        service = InsightService(mock_mode=True, cache_ttl_seconds=60, clock=FakeClock(), cache_max_entries=3)
        for customers in range(10):
            service.generate(_report(customers=customers), AnalysisType.PRICING)
        assert service.cache_size == 3

    def test_oldest_entry_evicted_first(self, monkeypatch):
        calls = []

        def _fake_call(system_prompt, prompt, output_model):
            calls.append(prompt)
            return NarrativeInsightList(insights=[])

        monkeypatch.setattr(llm_service, "llm_json_call", _fake_call)
        service = InsightService(mock_mode=False, cache_ttl_seconds=60, clock=FakeClock(), cache_max_entries=2)

        service.generate(_report(customers=1), AnalysisType.PRICING)
        service.generate(_report(customers=2), AnalysisType.PRICING)
        service.generate(_report(customers=3), AnalysisType.PRICING)
        assert len(calls) == 3

        service.generate(_report(customers=3), AnalysisType.PRICING)
        assert len(calls) == 3
        service.generate(_report(customers=1), AnalysisType.PRICING)
        assert len(calls) == 4

    def test_expired_entries_purged_on_write(self):
        clock = FakeClock()
        service = InsightService(mock_mode=True, cache_ttl_seconds=10, clock=clock, cache_max_entries=100)
        for customers in range(5):
            service.generate(_report(customers=customers), AnalysisType.PRICING)
        clock.now = 11
        service.generate(_report(customers=99), AnalysisType.PRICING)
        assert service.cache_size == 1

    def test_llm_failure_falls_back(self, monkeypatch):
        def _failing(*args, **kwargs):
            raise llm_service.LLMUnavailableError("no key")

        monkeypatch.setattr(llm_service, "llm_json_call", _failing)
        insights = InsightService(mock_mode=False).generate(_report(), AnalysisType.PRICING)
        assert insights[0].id == "pricing-1"


class TestLeadService:
    def _service(self, now: datetime) -> tuple[LeadService, dict]:
        state = {"now": now}
        return LeadService(clock=lambda: state["now"]), state

    def test_capture_normalizes(self):
        service = LeadService()
        lead = service.capture("  Founder@Example.COM ")
        assert lead.email == "founder@example.com"
        assert service.list_leads() == [lead]

    @pytest.mark.parametrize("email", ["", "nope", "a@b", "two@@example.com"])
    def test_invalid_email(self, email):
        with pytest.raises(InvalidEmailError):
            LeadService().capture(email)

    def test_stats(self):
        now = datetime(2026, 3, 10, 15, 0, tzinfo=timezone.utc)
        service, state = self._service(now - timedelta(days=30))
        service.capture("old@example.com")
        state["now"] = now - timedelta(days=3)
        service.capture("recent@example.com")
        state["now"] = now
        service.capture("today@example.com")

        assert service.stats() == {"total": 3, "today": 1, "thisWeek": 2}

    def test_export_csv(self):
        now = datetime(2026, 3, 10, 15, 0, tzinfo=timezone.utc)
        service, _ = self._service(now)
        service.capture("a@example.com")
        lines = service.export_csv().splitlines()
        assert lines[0] == "Email,Date Captured"
        assert lines[1] == f"a@example.com,{now.isoformat()}"

    def test_store_is_bounded(self):
        service = LeadService(max_entries=3)
        for i in range(5):
            service.capture(f"lead{i}@example.com")
        assert [lead.email for lead in service.list_leads()] == [
            "lead2@example.com",
            "lead3@example.com",
            "lead4@example.com",
        ]
        assert service.stats()["total"] == 3

    def test_clear(self):
        service = LeadService()
        service.capture("a@example.com")
        service.capture("b@example.com")
        assert service.clear() == 2
        assert service.list_leads() == []


class TestLLMService:
    def test_missing_api_key(self, monkeypatch):
        from pricing_calculator.config import Settings

        monkeypatch.setattr(llm_service, "_llm_instance", None)
        monkeypatch.setattr(llm_service, "get_settings", lambda: Settings(groq_api_key=""))
        with pytest.raises(llm_service.LLMUnavailableError):
            llm_service.get_llm()

    def test_structured_call_uses_system_prompt(self, monkeypatch):
        seen = {}

        class FakeStructured:
            def invoke(self, messages):
                seen["messages"] = messages
                return NarrativeInsightList(insights=[])

        class FakeLLM:
            def with_structured_output(self, model):
                seen["model"] = model
                return FakeStructured()

        monkeypatch.setattr(llm_service, "_llm_instance", FakeLLM())
        result = llm_service.llm_json_call("be terse", "report", NarrativeInsightList)

        assert result.insights == []
        assert seen["model"] is NarrativeInsightList
        assert seen["messages"] == [("system", "be terse"), ("human", "report")]
