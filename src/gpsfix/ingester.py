import logging
import threading
import time
from dataclasses import dataclass
from typing import BinaryIO

from gpsfix.fix_store import FixStore
from gpsfix.sentences import (
    DecodeError,
    LocationSentence,
    OtherSentence,
    TimeDateSentence,
    decode,
)

logger = logging.getLogger(__name__)


class StreamFailure(Exception):
    """The stream kept failing and should be reopened by its owner."""


@dataclass
class IngestStats:
    sentences_received: int = 0
    decode_errors: int = 0
    read_errors: int = 0
    last_sentence_time: float | None = None


class StreamIngester:
    """Feeds NMEA lines from a byte stream into a :class:`FixStore`.

    This is the only writer of the store. Errors on a single read or a single
    line are logged and skipped; only a run of ``max_read_errors`` consecutive
    read failures ends :meth:`run`, with :class:`StreamFailure`.
    """

    def __init__(
        self,
        store: FixStore,
        *,
        require_checksum: bool = False,
        max_read_errors: int = 10,
    ) -> None:
        self.store = store
        self.require_checksum = require_checksum
        self.max_read_errors = max_read_errors
        self.stats = IngestStats()
        self._stop = threading.Event()

    def stop(self) -> None:
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    # ── Main loop ─────────────────────────────────────────

    def run(self, stream: BinaryIO, *, stop_on_eof: bool = False) -> None:
        """Read ``stream`` line by line until stopped.

        An empty read is a timeout on a serial port, so it only ends the loop
        when ``stop_on_eof`` is set (files, pipes, sockets).
        """
        consecutive_failures = 0

        while not self._stop.is_set():
            try:
                raw = stream.readline()
            except OSError as exc:
                self.stats.read_errors += 1
                consecutive_failures += 1
                logger.warning("Error while reading from stream: %s", exc)
                if consecutive_failures >= self.max_read_errors:
                    raise StreamFailure(
                        f"{consecutive_failures} consecutive read errors"
                    ) from exc
                continue

            consecutive_failures = 0
            if not raw:
                if stop_on_eof:
                    logger.info("End of stream")
                    return
                continue

            self.ingest_line(raw.decode("ascii", errors="replace"))

    # ── Per-line handling ─────────────────────────────────

    def ingest_line(self, line: str) -> None:
        line = line.rstrip("\r\n")
        if not line:
            return
        logger.debug("Raw sentence: %s", line)

        result = decode(line, require_checksum=self.require_checksum)
        if isinstance(result, DecodeError):
            self.stats.decode_errors += 1
            logger.warning("Error while parsing %r: %s", result.line, result.cause)
            return

        self.stats.sentences_received += 1
        self.stats.last_sentence_time = time.monotonic()

        if isinstance(result, TimeDateSentence):
            self.store.update_time(result.timestamp)
            logger.debug("New time %s", result.timestamp.isoformat())
        elif isinstance(result, LocationSentence):
            self.store.update_location(
                latitude=result.latitude,
                longitude=result.longitude,
                altitude=result.altitude,
                satellites=result.satellites,
                latitude_native=result.latitude_native,
                longitude_native=result.longitude_native,
                latitude_dms=result.latitude_dms,
                longitude_dms=result.longitude_dms,
            )
            logger.debug(
                "New location lat=%s lon=%s alt=%s sats=%s",
                result.latitude,
                result.longitude,
                result.altitude,
                result.satellites,
            )
        elif isinstance(result, OtherSentence):
            logger.debug("Skipping %s", result.sentence_type)
        else:
            raise TypeError(f"unhandled sentence {result!r}")
