"""Unit tests for the analyzer service wiring."""

from datetime import date
from unittest.mock import MagicMock

import pytest

from futuna.application import AnalyzerService, build_service
from futuna.config import AnalyzerSettings, FutunaConfig
from futuna.domain.exceptions import AuthError, PersistenceError, RateLimitedError
from futuna.infrastructure.database import AnalysisPersister, ResultStore, TickerCatalog
from futuna.infrastructure.llm import OpenAIChatAdapter, RateLimitRetryAdapter


@pytest.fixture
def catalog(db):
    catalog = TickerCatalog(db)
    catalog.add_tickers(["VNM", "FPT", "HPG", "MWG", "VCB", "ACB", "SSI"])
    return catalog


def _service(db, catalog, adapter, **settings):
    return AnalyzerService(
        catalog=catalog,
        adapter=adapter,
        persister=AnalysisPersister(db),
        settings=AnalyzerSettings(**settings),
    )


class TestAnalyzeAllAndStore:
    @pytest.mark.asyncio
    async def test_every_ticker_is_analyzed_once(self, db, catalog, fake_adapter_cls):
        adapter = fake_adapter_cls()
        report = await _service(db, catalog, adapter).analyze_all_and_store()

        assert report.ok
        assert len(adapter.calls) == 2
        assert [len(call) for call in adapter.calls] == [5, 2]
        assert sorted(s for call in adapter.calls for s in call) == ["ACB", "FPT", "HPG", "MWG", "SSI", "VCB", "VNM"]
        assert len(ResultStore(db).list_analyses(date(2024, 1, 15))) == 7

    @pytest.mark.asyncio
    async def test_overrides_replace_settings(self, db, catalog, fake_adapter_cls):
        adapter = fake_adapter_cls(delay=0.01)
        report = await _service(db, catalog, adapter).analyze_all_and_store(batch_size=2, max_concurrency=1)

        assert len(report.outcomes) == 4
        assert adapter.max_in_flight == 1

    @pytest.mark.asyncio
    async def test_empty_catalog_runs_nothing(self, db, fake_adapter_cls):
        adapter = fake_adapter_cls()
        report = await _service(db, TickerCatalog(db), adapter).analyze_all_and_store()

        assert report.ok
        assert adapter.calls == []

    @pytest.mark.asyncio
    async def test_rate_limit_retried_through_service(self, db, catalog, fake_adapter_cls):
        inner = fake_adapter_cls(script={"ACB": [RateLimitedError("slow down"), RateLimitedError("slow down"), None]})
        adapter = RateLimitRetryAdapter(inner, attempts=3, delay_seconds=0)

        report = await _service(db, catalog, adapter).analyze_all_and_store()

        assert report.ok
        assert [call[0] for call in inner.calls].count("ACB") == 3


class TestAnalyzeOnStart:
    @pytest.mark.asyncio
    async def test_disabled_returns_none(self, db, catalog, fake_adapter_cls):
        adapter = fake_adapter_cls()
        assert await _service(db, catalog, adapter).analyze_on_start() is None
        assert adapter.calls == []

    @pytest.mark.asyncio
    async def test_enabled_runs_analysis(self, db, catalog, fake_adapter_cls):
        report = await _service(db, catalog, fake_adapter_cls(), analyze_on_start=True).analyze_on_start()

        assert report is not None and report.ok

    @pytest.mark.asyncio
    async def test_failures_are_logged_not_raised(self, db, catalog, fake_adapter_cls, caplog):
        adapter = fake_adapter_cls(script={"ACB": AuthError("bad key")})
        report = await _service(db, catalog, adapter, analyze_on_start=True).analyze_on_start()

        assert isinstance(report.error, AuthError)
        assert "Initial analysis finished with errors" in caplog.text

    @pytest.mark.asyncio
    async def test_catalog_outage_is_logged_not_raised(self, db, fake_adapter_cls, caplog):
        catalog = MagicMock(spec=TickerCatalog)
        catalog.list_tickers.side_effect = PersistenceError("connection refused")
        adapter = fake_adapter_cls()

        report = await _service(db, catalog, adapter, analyze_on_start=True).analyze_on_start()

        assert report is None
        assert adapter.calls == []
        assert "Initial analysis could not start" in caplog.text


def test_build_service_wraps_openai_adapter_with_retry(db):
    config = FutunaConfig(openai={"api_key": "sk-test", "rate_limit_attempts": 4}, analyzer={"batch_size": 3})
    service = build_service(config, db)

    assert isinstance(service.adapter, RateLimitRetryAdapter)
    assert isinstance(service.adapter.inner, OpenAIChatAdapter)
    assert service.adapter.attempts == 4
    assert service.settings.batch_size == 3


def test_build_service_keeps_given_adapter(db, fake_adapter_cls):
    adapter = fake_adapter_cls()
    assert build_service(FutunaConfig(), db, adapter=adapter).adapter is adapter
