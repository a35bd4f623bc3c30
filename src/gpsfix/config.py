from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Serial GPS receiver
    serial_port: str = "/dev/ttyUSB0"
    serial_baud: int = 115200
    read_timeout: float = 5.0

    # HTTP server
    host: str = "localhost"
    port: int = 54321

    log_level: str = "INFO"
    verbose: bool = False

    # Ingestion
    require_checksum: bool = False
    max_read_errors: int = 10
    stale_after: float = 10.0

    model_config = {"env_prefix": "GPSFIX_"}

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.verbose else self.log_level.upper()
