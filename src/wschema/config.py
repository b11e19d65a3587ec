"""Library configuration via pydantic-settings (.env + WSCHEMA_* env vars).

Settings never reach validation implicitly: build a ParseContext with
``parse_context()`` and pass it to ``parse``/``safe_parse``/``implement``.
"""

import sys
from pathlib import Path

from loguru import logger
from pydantic_settings import BaseSettings, SettingsConfigDict

from .context import ParseContext
from .errors import ConfigError
from .issues import ErrorMap

_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

LOG_FORMAT = "{time:YYYY-MM-DDTHH:mm:ssZ} | {level:<8} | {extra[component]:<12} | {message}"


def with_component(record) -> bool:
    """Sink filter: records logged without ``bind(component=...)`` get an empty one."""
    record["extra"].setdefault("component", "")
    return True


class SchemaSettings(BaseSettings):
    """Defaults for validation and logging with layered resolution:
    .env file < environment variables < constructor kwargs.
    """

    model_config = SettingsConfigDict(
        env_prefix="WSCHEMA_",
        env_file=".env",
        extra="ignore",
    )

    # -- Logging --
    log_level: str = "INFO"
    log_file: Path | None = None
    log_rotation: str = "10 MB"
    log_retention: str = "30 days"

    # -- Validation defaults --
    abort_early: bool = False
    report_input: bool = True
    suggestion_cutoff: float = 80.0  # rapidfuzz score, 0-100

    def check_values(self) -> None:
        """Raise ConfigError if any setting is out of range."""
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ConfigError(
                f"log_level must be one of {', '.join(_LOG_LEVELS)}, got '{self.log_level}'"
            )
        if not 0.0 <= self.suggestion_cutoff <= 100.0:
            raise ConfigError(
                f"suggestion_cutoff must be between 0 and 100, got {self.suggestion_cutoff}"
            )

    def parse_context(self, error_map: ErrorMap | None = None) -> ParseContext:
        """ParseContext carrying these defaults."""
        self.check_values()
        return ParseContext(
            error_map=error_map,
            abort_early=self.abort_early,
            report_input=self.report_input,
            suggestion_cutoff=self.suggestion_cutoff,
        )

    def log_sinks(self) -> list[tuple[object, dict]]:
        """(sink, options) pairs for ``setup_logging``: console first, then the file."""
        sinks: list[tuple[object, dict]] = [
            (sys.stderr, {"level": self.log_level.upper()}),
        ]
        if self.log_file is not None:
            sinks.append((
                str(self.log_file),
                {
                    "level": "DEBUG",
                    "rotation": self.log_rotation,
                    "retention": self.log_retention,
                },
            ))
        return sinks

    def setup_logging(self) -> None:
        """Replace loguru's sinks with ours and enable the wschema namespace."""
        self.check_values()
        sinks = self.log_sinks()
        if self.log_file is not None:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)

        logger.remove()
        logger.enable("wschema")
        for sink, options in sinks:
            logger.add(sink, format=LOG_FORMAT, filter=with_component, **options)
