"""User configuration (``antler.yaml``)."""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

DEFAULT_BUILDFILE = "default.build"

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    """Validated configuration.

    ``properties`` are seeded read-only into every project, below the
    command line.  ``extensions`` are module or package names scanned for
    tasks and function sets in addition to the built-ins.
    """

    model_config = ConfigDict(extra="forbid")

    properties: dict[str, str | bool | int | float] = {}
    extensions: list[str] = []
    log_level: str = "INFO"
    buildfile: str = DEFAULT_BUILDFILE

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @model_validator(mode="after")
    def _check_names(self) -> Self:
        for name in self.properties:
            if not name.strip():
                raise ValueError("property names must not be empty")
        if not self.buildfile.strip():
            raise ValueError("buildfile must not be empty")
        return self

    def merged(self, **overrides: object) -> Settings:
        """Copy with non-``None`` overrides applied; ``properties`` are merged."""
        data = self.model_dump()
        for key, value in overrides.items():
            if value is None:
                continue
            if key == "properties":
                data["properties"] = {**data["properties"], **value}
            elif key == "extensions":
                data["extensions"] = [*data["extensions"], *value]
            else:
                data[key] = value
        return Settings.model_validate(data)
