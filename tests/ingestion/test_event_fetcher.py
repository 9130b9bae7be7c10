"""
Event Fetcher Tests

Failed fetches are first-class results. No network: every request goes
through httpx.MockTransport.
"""

import asyncio
import pytest
import httpx

from backend.contracts.base import ErrorCode
from ingestion.contracts import EventSource, FetchStatus, RawEventRecord
from ingestion.fetcher import EventFetcher
from tests.fixtures import scenario_a_payload

SOURCE = EventSource(url="https://events.test/api/week_of_events", timeout=2.0)


def _fetcher(handler) -> EventFetcher:
    transport = httpx.MockTransport(handler)
    return EventFetcher(SOURCE, transport=transport, async_transport=transport)


class TestEventFetcherSync:

    def test_success_returns_raw_records_in_wire_order(self):
        seen = {}

        def handler(request):
            seen['url'] = str(request.url)
            seen['agent'] = request.headers['User-Agent']
            return httpx.Response(200, json=scenario_a_payload())

        result, records = _fetcher(handler).fetch_sync()

        assert result.success
        assert result.records_count == 3
        assert result.to_error() is None
        assert [r.name for r in records] == ["Rehearsal", "Warmup", "Concert"]
        assert isinstance(records[0], RawEventRecord)
        assert seen['url'] == SOURCE.url
        assert seen['agent'] == SOURCE.user_agent

    def test_empty_array_is_a_successful_fetch(self):
        result, records = _fetcher(lambda request: httpx.Response(200, json=[])).fetch_sync()
        assert result.success
        assert records == []

    def test_http_error_status(self):
        result, records = _fetcher(lambda request: httpx.Response(503)).fetch_sync()

        assert result.status == FetchStatus.HTTP_ERROR
        assert result.http_status == 503
        assert records == []
        error = result.to_error()
        assert error.code == ErrorCode.FETCH_HTTP_STATUS
        assert error.context_value('http_status') == "503"

    def test_non_array_payload_is_a_parse_error(self):
        result, records = _fetcher(
            lambda request: httpx.Response(200, json={'events': []})
        ).fetch_sync()

        assert result.status == FetchStatus.PARSE_ERROR
        assert result.to_error().code == ErrorCode.MALFORMED_PAYLOAD
        assert records == []

    def test_invalid_json_is_a_parse_error(self):
        result, _ = _fetcher(
            lambda request: httpx.Response(200, content=b"<html>oops</html>")
        ).fetch_sync()
        assert result.status == FetchStatus.PARSE_ERROR

    def test_timeout(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        result, records = _fetcher(handler).fetch_sync()

        assert result.status == FetchStatus.TIMEOUT
        assert result.to_error().code == ErrorCode.FETCH_TIMEOUT
        assert records == []

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        result, _ = _fetcher(handler).fetch_sync()

        assert result.status == FetchStatus.NETWORK_ERROR
        assert "connection refused" in result.error_message

    def test_exactly_one_request_no_retry(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500)

        _fetcher(handler).fetch_sync()
        assert len(calls) == 1


class TestEventFetcherAsync:

    def test_async_success(self):
        fetcher = _fetcher(lambda request: httpx.Response(200, json=scenario_a_payload()))
        result, records = asyncio.run(fetcher.fetch())

        assert result.success
        assert len(records) == 3

    def test_async_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        result, records = asyncio.run(_fetcher(handler).fetch())
        assert result.status == FetchStatus.TIMEOUT
        assert records == []
