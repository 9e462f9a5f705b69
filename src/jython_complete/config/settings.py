from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class InferenceSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    capture_prefix: str = Field(default="____GRAB____")
    builtin_module: str = Field(default="__builtin__")
    tolerate_syntax_errors: bool = Field(default=False)

    @field_validator("capture_prefix", "builtin_module")
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        if not v.isidentifier():
            raise ValueError(f"Must be a valid Python identifier: {v!r}")
        return v


class ModuleSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    module_paths: list[Path] = Field(default_factory=list)
    include_interpreter_paths: bool = Field(default=False)
    watch_modules: bool = Field(default=True)
    module_cache_entries: int = Field(default=256, gt=0)


class ProviderSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    reflection_catalog: Path | None = Field(default=None)
    builtin_entries_file: Path | None = Field(default=None)


class Settings(BaseSettings):
    """Composed settings with flat property access."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    inference: InferenceSettings = Field(default_factory=InferenceSettings)
    modules: ModuleSettings = Field(default_factory=ModuleSettings)
    providers: ProviderSettings = Field(default_factory=ProviderSettings)
    log_level: str = Field(default="WARNING")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def capture_prefix(self) -> str:
        return self.inference.capture_prefix

    @property
    def builtin_module(self) -> str:
        return self.inference.builtin_module

    @property
    def tolerate_syntax_errors(self) -> bool:
        return self.inference.tolerate_syntax_errors

    @property
    def module_paths(self) -> list[Path]:
        return self.modules.module_paths

    @property
    def watch_modules(self) -> bool:
        return self.modules.watch_modules

    @property
    def reflection_catalog(self) -> Path | None:
        return self.providers.reflection_catalog


@lru_cache
def get_settings() -> Settings:
    return Settings()
