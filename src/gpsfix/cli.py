"""Command line entry point.

    gpsfix --tty /dev/ttyUSB0 --baudrate 115200 --host 0.0.0.0 --port 54321

Flags are exported as ``GPSFIX_*`` environment variables so the app's
:class:`~gpsfix.config.Settings` picks them up inside uvicorn.
"""

import argparse
import os

import uvicorn

from gpsfix.config import Settings


def build_parser(defaults: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gpsfix",
        description="Serve the latest fix of a serial NMEA GPS receiver over HTTP",
    )
    parser.add_argument(
        "--verbose", action="store_true", default=defaults.verbose,
        help="Enable verbose mode.",
    )
    parser.add_argument(
        "--tty", default=defaults.serial_port,
        help=f"Serial connection (default: {defaults.serial_port})",
    )
    parser.add_argument(
        "--baudrate", type=int, default=defaults.serial_baud,
        help=f"Baudrate of the serial connection (default: {defaults.serial_baud})",
    )
    parser.add_argument(
        "--host", default=defaults.host,
        help=f"Host to listen on (default: {defaults.host})",
    )
    parser.add_argument(
        "--port", type=int, default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})",
    )
    return parser


def settings_env(args: argparse.Namespace) -> dict[str, str]:
    return {
        "GPSFIX_VERBOSE": "true" if args.verbose else "false",
        "GPSFIX_SERIAL_PORT": args.tty,
        "GPSFIX_SERIAL_BAUD": str(args.baudrate),
        "GPSFIX_HOST": args.host,
        "GPSFIX_PORT": str(args.port),
    }


def main(argv: list[str] | None = None) -> None:
    args = build_parser(Settings()).parse_args(argv)
    os.environ.update(settings_env(args))
    uvicorn.run(
        "gpsfix.main:app",
        host=args.host,
        port=args.port,
        log_level="debug" if args.verbose else "info",
    )


if __name__ == "__main__":
    main()
