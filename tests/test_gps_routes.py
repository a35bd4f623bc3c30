import time
from contextlib import asynccontextmanager
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from gpsfix.config import Settings
from gpsfix.fix_store import FixStore
from gpsfix.ingester import StreamIngester
from gpsfix.routes.gps import router as gps_router
from gpsfix.routes.status import router as status_router

RMC = "$GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W*6A"
GGA = "$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,47.0,M,,*4F"


class FakeClock:
    def __init__(self) -> None:
        self.now = 500.0

    def __call__(self) -> float:
        return self.now


def _make_app(
    store: FixStore | None, ingester: StreamIngester | None, *, connected: bool = True
) -> FastAPI:
    """Build a test app with no real lifespan (no serial port)."""

    @asynccontextmanager
    async def _noop_lifespan(app: FastAPI):
        app.state.config = Settings(stale_after=10.0)
        app.state.start_time = time.monotonic()
        if store is not None:
            app.state.fix_store = store
            app.state.ingester = ingester
            app.state.gps_reader = MagicMock(serial_connected=connected)
        yield

    test_app = FastAPI(lifespan=_noop_lifespan)
    test_app.include_router(gps_router)
    test_app.include_router(status_router)
    return test_app


@pytest.fixture()
def client():
    clock = FakeClock()
    store = FixStore(clock=clock)
    ingester = StreamIngester(store)
    with TestClient(_make_app(store, ingester), raise_server_exceptions=False) as tc:
        yield tc, ingester, clock


class TestFixRoute:
    def test_no_store_returns_404(self):
        app = _make_app(None, None)
        with TestClient(app, raise_server_exceptions=False) as tc:
            assert tc.get("/").status_code == 404
            assert tc.get("/health").status_code == 404

    def test_empty_fix(self, client):
        tc, _, _ = client
        resp = tc.get("/")
        assert resp.status_code == 200
        data = resp.json()
        assert data["timestamp"] is None
        assert data["latitude"] == 0.0
        assert data["satellites"] == 0
        assert data["age_s"] == 0.0
        assert data["time_age_s"] is None
        assert data["location_age_s"] is None

    def test_fix_after_sentences(self, client):
        tc, ingester, clock = client
        ingester.ingest_line(RMC)
        ingester.ingest_line(GGA)
        clock.now += 1.5

        data = tc.get("/").json()
        assert data["timestamp"] == "2094-03-23T12:35:19Z"
        assert abs(data["latitude"] - 48.1173) < 1e-9
        assert abs(data["longitude"] - 11.516667) < 1e-6
        assert data["latitude_native"] == "4807.0380N"
        assert data["longitude_native"] == "01131.0000E"
        assert data["latitude_dms"] == "48°7'2.28\"N"
        assert data["longitude_dms"] == "11°31'0.00\"E"
        assert abs(data["altitude"] - 545.4) < 1e-9
        assert data["satellites"] == 8
        assert data["age_s"] == 1.5
        assert data["time_age_s"] == 1.5
        assert data["location_age_s"] == 1.5

    def test_fix_alias(self, client):
        tc, ingester, _ = client
        ingester.ingest_line(GGA)
        assert tc.get("/fix").json() == tc.get("/").json()


class TestHealth:
    def test_no_fix(self, client):
        tc, _, _ = client
        data = tc.get("/health").json()
        assert data["status"] == "no_fix"
        assert data["last_sentence_age_s"] is None
        assert data["serial_connected"] is True

    def test_ok(self, client):
        tc, ingester, _ = client
        ingester.ingest_line(GGA)
        ingester.ingest_line("garbage")
        data = tc.get("/health").json()
        assert data["status"] == "ok"
        assert data["sentences_received"] == 1
        assert data["decode_errors"] == 1
        assert data["read_errors"] == 0
        assert data["last_sentence_age_s"] is not None

    def test_stale(self, client):
        tc, ingester, clock = client
        ingester.ingest_line(RMC)
        clock.now += 30
        data = tc.get("/health").json()
        assert data["status"] == "stale"
        assert data["fix_age_s"] == 30.0

    def test_disconnected(self):
        store = FixStore()
        app = _make_app(store, StreamIngester(store), connected=False)
        with TestClient(app, raise_server_exceptions=False) as tc:
            data = tc.get("/health").json()
            assert data["status"] == "disconnected"
            assert data["serial_connected"] is False
