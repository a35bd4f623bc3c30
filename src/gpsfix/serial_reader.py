import asyncio
import logging

import serial

from gpsfix.config import Settings
from gpsfix.ingester import StreamFailure, StreamIngester

logger = logging.getLogger(__name__)


class SerialReader:
    """Owns the serial GPS device and runs the ingester against it.

    The blocking read loop runs in a worker thread so the event loop stays
    free for HTTP requests. When the port cannot be opened or keeps failing it
    is closed and reopened with exponential backoff.
    """

    def __init__(self, config: Settings, ingester: StreamIngester) -> None:
        self.config = config
        self.ingester = ingester
        self.serial_connected = False
        self._task: asyncio.Task | None = None

    # ── Lifecycle ──────────────────────────────────────────

    async def start(self) -> None:
        self._task = asyncio.create_task(self._read_loop(), name="gps-reader")
        logger.info(
            "SerialReader started, port=%s baud=%s timeout=%ss",
            self.config.serial_port,
            self.config.serial_baud,
            self.config.read_timeout,
        )

    async def stop(self) -> None:
        self.ingester.stop()
        if self._task:
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)
        logger.info("SerialReader stopped")

    # ── Main loop ─────────────────────────────────────────

    async def _read_loop(self) -> None:
        backoff = 1.0

        while not self.ingester.stopped:
            try:
                ser = serial.Serial(
                    self.config.serial_port,
                    self.config.serial_baud,
                    timeout=self.config.read_timeout,
                )
                self.serial_connected = True
                backoff = 1.0
                logger.info("Serial port %s opened", self.config.serial_port)

                worker = asyncio.ensure_future(
                    asyncio.to_thread(self.ingester.run, ser)
                )
                try:
                    await asyncio.shield(worker)
                finally:
                    if not worker.done():
                        # cancelled: let the thread leave readline() before closing
                        self.ingester.stop()
                        await asyncio.gather(worker, return_exceptions=True)
                    self.serial_connected = False
                    ser.close()

            except serial.SerialException as exc:
                logger.warning(
                    "Serial error on %s: %s. Reconnecting in %.0fs",
                    self.config.serial_port,
                    exc,
                    backoff,
                )
            except StreamFailure as exc:
                logger.warning(
                    "Serial port %s failed (%s). Reconnecting in %.0fs",
                    self.config.serial_port,
                    exc,
                    backoff,
                )
            except asyncio.CancelledError:
                return
            except Exception as exc:
                logger.error("Unexpected GPS error: %s", exc)

            if self.ingester.stopped:
                return
            try:
                await asyncio.sleep(backoff)
            except asyncio.CancelledError:
                return
            backoff = min(backoff * 2, 10.0)
