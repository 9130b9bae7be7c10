"""
Layout API Tests

Exercises the FastAPI app with an injected session; no network access.
"""

import pytest
import httpx
from fastapi.testclient import TestClient

from backend.api.server import build_session, create_app
from backend.config import TimelineConfig
from backend.temporal.clock import LogicalClock
from frontend.session import TimelineSession
from ingestion.contracts import EventSource
from ingestion.fetcher import EventFetcher
from tests.fixtures import MON_0900, WED_1200, scenario_a_payload, wire_record

SOURCE = EventSource(url="https://events.test/api/week_of_events", timeout=2.0)


def _client(handler) -> TestClient:
    transport = httpx.MockTransport(handler)

    def session_factory():
        return TimelineSession(
            EventFetcher(SOURCE, transport=transport, async_transport=transport),
            clock=LogicalClock.fixed(WED_1200)
        )

    return TestClient(create_app(session_factory))


@pytest.fixture
def client():
    with _client(lambda request: httpx.Response(200, json=scenario_a_payload())) as c:
        yield c


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "online"}


class TestTimelineEndpoint:

    def test_returns_the_laid_out_week(self, client):
        data = client.get("/api/v1/timeline").json()

        assert data["dto_version"] == "v1"
        assert data["window"]["start"] == "2026-10-12T00:00:00Z"
        assert data["window"]["end"] == "2026-10-18T23:59:59.999000Z"
        assert [e["name"] for e in data["events"]] == ["Rehearsal", "Warmup", "Concert"]
        assert [e["dot_visible"] for e in data["events"]] == [True, False, True]
        assert data["events"][1]["dot_y"] == -9.0
        assert data["events"][0]["href"] == "#/events/1"
        assert data["now"]["instant"] == "2026-10-14T12:00:00Z"
        assert data["now"]["within_window"] is True
        assert data["axis"]["x"] == 99.0
        assert [t["label"] for t in data["axis"]["ticks"]][0] == "Mon"
        assert data["geometry"]["label_x"] == 115.0
        assert data["malformed"] == []

    def test_upstream_failure_is_a_bad_gateway(self):
        with _client(lambda request: httpx.Response(503)) as client:
            response = client.get("/api/v1/timeline")

        assert response.status_code == 502
        assert response.json()["detail"]["code"] == "FETCH_HTTP_STATUS"


class TestLayoutEndpoint:

    def test_lays_out_posted_records_at_the_given_now(self, client):
        response = client.post("/api/v1/timeline/layout", json={
            "records": [
                wire_record(1, "Rehearsal", MON_0900),
                {"id": 2, "name": "Broken", "callTime": "later"},
            ],
            "now": "2026-10-13T08:00:00Z",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["now"]["instant"] == "2026-10-13T08:00:00Z"
        assert [e["id"] for e in data["events"]] == [1]
        assert data["malformed"][0]["code"] == "INVALID_TIMESTAMP"

    def test_now_defaults_to_the_session_clock(self, client):
        response = client.post("/api/v1/timeline/layout", json={"records": []})
        assert response.json()["now"]["instant"] == "2026-10-14T12:00:00Z"

    def test_non_object_records_are_reported_as_malformed(self, client):
        response = client.post("/api/v1/timeline/layout", json={
            "records": [wire_record(1, "Rehearsal", MON_0900), "garbage", 42],
            "now": "2026-10-14T12:00:00Z",
        })

        assert response.status_code == 200
        data = response.json()
        assert [e["id"] for e in data["events"]] == [1]
        assert [m["code"] for m in data["malformed"]] == ["MISSING_FIELD", "MISSING_FIELD"]
        assert data["malformed"][0]["record"]["callTime"] == "garbage"

    def test_records_must_be_a_list(self, client):
        response = client.post("/api/v1/timeline/layout", json={"records": "nope"})
        assert response.status_code == 422


class TestServerSession:

    def test_memory_stays_bounded_across_requests(self):
        app = create_app(lambda: build_session(TimelineConfig(), audit_limit=20))

        with TestClient(app) as client:
            for _ in range(60):
                response = client.post("/api/v1/timeline/layout", json={"records": ["garbage"]})
                assert response.status_code == 200
            session = app.state.session

            assert session.clock.tick_count() == 60
            assert session.clock.recorded_ticks == ()
            assert session.audit.entry_count == 20

    def test_server_clock_is_live(self):
        session = build_session(TimelineConfig())
        assert session.clock.is_live()
