import time

from fastapi import APIRouter, Request

from gpsfix.models import HealthResponse
from gpsfix.routes.gps import require_store

router = APIRouter(tags=["status"])


@router.get("/health", response_model=HealthResponse)
async def get_health(request: Request) -> HealthResponse:
    view = require_store(request).snapshot()
    stats = request.app.state.ingester.stats
    reader = getattr(request.app.state, "gps_reader", None)
    connected = reader is not None and reader.serial_connected
    start = request.app.state.start_time
    now = time.monotonic()

    if not connected:
        status = "disconnected"
    elif not (view.has_time or view.has_location):
        status = "no_fix"
    elif view.age > request.app.state.config.stale_after:
        status = "stale"
    else:
        status = "ok"

    return HealthResponse(
        status=status,
        serial_connected=connected,
        sentences_received=stats.sentences_received,
        decode_errors=stats.decode_errors,
        read_errors=stats.read_errors,
        last_sentence_age_s=(
            None
            if stats.last_sentence_time is None
            else round(now - stats.last_sentence_time, 1)
        ),
        fix_age_s=round(view.age, 1),
        uptime_s=round(now - start, 1),
    )
