# DEEZ Configuration Schema
# Pydantic models for YAML configuration validation

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from deez.utils.platform import default_shell


class OutputConfig(BaseModel):
    """Output settings."""

    colored: bool = Field(default=True, description="Enable colored output")
    pager: bool = Field(default=True, description="Page diff output when stdout is a terminal")


class HooksConfig(BaseModel):
    """Hook execution settings."""

    shell: list[str] = Field(
        default_factory=default_shell,
        description="Command interpreter prefix used to run hook scripts",
    )

    @field_validator("shell")
    @classmethod
    def shell_not_empty(cls, v: list[str]) -> list[str]:
        """Require at least the interpreter executable."""
        if not v:
            raise ValueError("shell must name an interpreter")
        return v


class CleanConfig(BaseModel):
    """Settings for the clean command."""

    prune_empty_dirs: bool = Field(
        default=True,
        description="Remove directories left empty in Home after clean",
    )


class DiffConfig(BaseModel):
    """Settings for the diff command."""

    context_lines: int = Field(default=3, ge=0, description="Lines of context around changes")


class DeezConfig(BaseModel):
    """Root configuration model for DEEZ."""

    root: str | None = Field(default=None, description="Default root when none is found")
    verbose: bool = Field(default=False, description="Enable verbose output")
    ignore: list[str] = Field(
        default_factory=list,
        description="Extra root-relative ignore patterns (gitignore syntax)",
    )
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output settings")
    hooks: HooksConfig = Field(default_factory=HooksConfig, description="Hook settings")
    clean: CleanConfig = Field(default_factory=CleanConfig, description="Clean settings")
    diff: DiffConfig = Field(default_factory=DiffConfig, description="Diff settings")

    @field_validator("root")
    @classmethod
    def expand_root(cls, v: str | None) -> str | None:
        """Expand ~ in root path."""
        if not v:
            return None
        return str(Path(v).expanduser())
