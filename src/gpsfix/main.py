import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI

from gpsfix.config import Settings
from gpsfix.fix_store import FixStore
from gpsfix.ingester import StreamIngester
from gpsfix.routes.gps import router as gps_router
from gpsfix.routes.status import router as status_router
from gpsfix.serial_reader import SerialReader


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = Settings()
    logging.basicConfig(
        level=config.effective_log_level,
        format="%(asctime)s %(levelname)-8s %(name)s  %(message)s",
    )
    logger = logging.getLogger("gpsfix")
    logger.debug("Settings: %s", config.model_dump())

    store = FixStore()
    ingester = StreamIngester(
        store,
        require_checksum=config.require_checksum,
        max_read_errors=config.max_read_errors,
    )
    reader = SerialReader(config, ingester)

    app.state.config = config
    app.state.fix_store = store
    app.state.ingester = ingester
    app.state.gps_reader = reader
    app.state.start_time = time.monotonic()

    await reader.start()
    logger.info("gpsfix ready, serving on %s:%s", config.host, config.port)

    yield

    await reader.stop()
    logger.info("gpsfix stopped")


app = FastAPI(
    title="gpsfix",
    description="Serves the latest NMEA fix of a serial GPS receiver as JSON",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(gps_router)
app.include_router(status_router)
