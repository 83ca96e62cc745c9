"""Pydantic models for igo configuration."""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import BaseModel, Field, field_validator

EMPTY_SKELETON = "package main\n\nfunc main() {}\n"


class ToolchainConfig(BaseModel):
    """Configuration for the Go toolchain."""

    go: str = Field(default="go", description="Go command")
    gofmt: str = Field(default="gofmt", description="gofmt command used to check input files")
    formatter: list[str] = Field(
        default=["goimports"], description="Import resolver/formatter argv; the path is appended"
    )
    module_path: str = Field(
        default="igo.localhost", description="Module path for the temporary workspace"
    )
    run_timeout: Optional[float] = Field(
        default=None, description="Seconds before a program run is killed (None = wait forever)"
    )
    env: dict[str, str] = Field(default={}, description="Extra environment for toolchain commands")

    @field_validator("formatter")
    @classmethod
    def formatter_not_empty(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("formatter must name a command")
        return v

    @field_validator("run_timeout")
    @classmethod
    def zero_timeout_disables(cls, v: Optional[float]) -> Optional[float]:
        """Treat a non-positive timeout as no timeout."""
        if v is not None and v <= 0:
            return None
        return v


class ReplConfig(BaseModel):
    """Configuration for the interactive loop."""

    prompt: str = Field(default="> ", description="Prompt shown before each statement")
    continuation_prompt: str = Field(
        default="", description="Prompt shown before continuation lines"
    )
    quit_commands: list[str] = Field(
        default=[".quit", ".exit"], description="Inputs that end the session"
    )
    shell_prefix: str = Field(default=":", description="Prefix routing a line to the shell")
    max_fix_attempts: int = Field(
        default=10, ge=1, description="Maximum unused-binding repair rounds per statement"
    )


class OutputConfig(BaseModel):
    """Configuration for output formatting."""

    colors: bool = Field(default=True, description="Enable colored error output")


class LogConfig(BaseModel):
    """Configuration for diagnostic logging."""

    level: str = Field(default="WARNING", description="Log level name")
    file: Optional[str] = Field(default=None, description="Optional log file")

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        name = str(v).upper()
        if not isinstance(logging.getLevelName(name), int):
            raise ValueError(f"unknown log level: {v}")
        return name


class IgoConfig(BaseModel):
    """Main configuration for igo."""

    toolchain: ToolchainConfig = Field(default_factory=ToolchainConfig)
    repl: ReplConfig = Field(default_factory=ReplConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    log: LogConfig = Field(default_factory=LogConfig)
