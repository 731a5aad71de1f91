from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from packages.core.watch.types import DEFAULT_POLL_INTERVAL_S, WatchConfig

DEFAULT_EXTRA_LABEL = "Unlock"
DEFAULT_EXTRA_COMMAND = "Unlock:open-vault 120s"


class ConfigError(ValueError):
    """Raised when the startup configuration is unusable."""


class CommandSpec(BaseModel):
    """A button label and the shell command it runs."""

    model_config = ConfigDict(frozen=True)

    label: str = DEFAULT_EXTRA_LABEL
    command: str

    @classmethod
    def parse(cls, text: str) -> "CommandSpec":
        # Split on the first colon only; the command itself may contain colons.
        label, sep, command = text.partition(":")
        if not sep:
            return cls(label=DEFAULT_EXTRA_LABEL, command=text)
        return cls(label=label, command=command)


class AppConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    presence_file: str
    command: str
    extra_command: CommandSpec = Field(default_factory=lambda: CommandSpec.parse(DEFAULT_EXTRA_COMMAND))
    icon: Optional[str] = None
    auto_trigger_extra: bool = True

    @field_validator("presence_file", "command")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("extra_command", mode="before")
    @classmethod
    def _parse_extra(cls, value):
        if isinstance(value, str):
            return CommandSpec.parse(value)
        return value

    @field_validator("icon")
    @classmethod
    def _blank_icon_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value

    def to_watch_config(self, poll_interval_s: float = DEFAULT_POLL_INTERVAL_S) -> WatchConfig:
        return WatchConfig(path=self.presence_file, poll_interval_s=poll_interval_s)


def load_config(**options) -> AppConfig:
    """
    Build an AppConfig from keyword options, dropping ones left as None so
    that model defaults apply.

    Raises:
        ConfigError: if a required option is missing or invalid.
    """
    data = {k: v for k, v in options.items() if v is not None}
    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        problems = []
        for err in e.errors():
            field = ".".join(str(p) for p in err["loc"]) or "config"
            problems.append(f"{field}: {err['msg']}")
        raise ConfigError("Invalid configuration - " + "; ".join(problems)) from e
