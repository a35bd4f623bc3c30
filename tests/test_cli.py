import os
from unittest.mock import patch

from gpsfix.cli import build_parser, main, settings_env
from gpsfix.config import Settings


class TestParser:
    def test_defaults(self):
        args = build_parser(Settings()).parse_args([])
        assert args.tty == Settings().serial_port
        assert args.baudrate == 115200
        assert args.host == "localhost"
        assert args.port == 54321
        assert args.verbose is False

    def test_env(self):
        args = build_parser(Settings()).parse_args(
            ["--tty", "/dev/ttyACM0", "--baudrate", "9600", "--verbose"]
        )
        env = settings_env(args)
        assert env["GPSFIX_SERIAL_PORT"] == "/dev/ttyACM0"
        assert env["GPSFIX_SERIAL_BAUD"] == "9600"
        assert env["GPSFIX_VERBOSE"] == "true"


class TestMain:
    def test_runs_uvicorn(self):
        with patch.dict(os.environ, {}), patch("gpsfix.cli.uvicorn.run") as run:
            main(["--tty", "/dev/ttyACM0", "--host", "0.0.0.0", "--port", "8080"])

            assert os.environ["GPSFIX_SERIAL_PORT"] == "/dev/ttyACM0"
            assert Settings().port == 8080
            run.assert_called_once_with(
                "gpsfix.main:app", host="0.0.0.0", port=8080, log_level="info"
            )


class TestSettings:
    def test_env_prefix(self):
        with patch.dict(os.environ, {"GPSFIX_SERIAL_BAUD": "4800"}):
            assert Settings().serial_baud == 4800

    def test_verbose_forces_debug(self):
        assert Settings(verbose=True, log_level="WARNING").effective_log_level == "DEBUG"
        assert Settings(log_level="warning").effective_log_level == "WARNING"
