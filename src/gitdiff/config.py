"""Configuration management for gitdiff."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

DEFAULT_MAX_OUTPUT_BYTES = 200 * 1024 * 1024
DEFAULT_GIT_EXECUTABLE = "git"


@dataclass
class DiffOptions:
    """
    Options for a single diff invocation.

    Attributes:
        working_dir: Directory to run git in (defaults to the process cwd)
        raw: Return raw bytes instead of UTF-8 decoded text
        max_output_bytes: Maximum number of stdout bytes accepted from git
        git_executable: Name or path of the git binary to launch
    """

    working_dir: Optional[Union[str, Path]] = None
    raw: bool = False
    max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES
    git_executable: str = DEFAULT_GIT_EXECUTABLE

    def validate(self) -> list[str]:
        """
        Validate the options.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if isinstance(self.max_output_bytes, bool) or not isinstance(self.max_output_bytes, int):
            errors.append("max_output_bytes must be an integer")
        elif self.max_output_bytes < 1:
            errors.append("max_output_bytes must be >= 1")

        if not isinstance(self.raw, bool):
            errors.append("raw must be true or false")

        if not self.git_executable or not isinstance(self.git_executable, str):
            errors.append("git_executable must be a non-empty string")

        return errors


@dataclass
class Config:
    """
    File-backed defaults for gitdiff.

    Attributes:
        git_executable: Name or path of the git binary to launch
        max_output_bytes: Default output cap in bytes
        raw: Whether to return raw bytes by default
        default_range: Revision range used when none is given on the command line
        metadata: Additional user-defined metadata
    """

    git_executable: str = DEFAULT_GIT_EXECUTABLE
    max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES
    raw: bool = False
    default_range: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def validate(self) -> list[str]:
        """
        Validate the configuration.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = self.to_diff_options().validate()

        if self.default_range is not None and not isinstance(self.default_range, str):
            errors.append("default_range must be a string")
        if not isinstance(self.metadata, dict):
            errors.append("metadata must be a mapping")

        return errors

    def to_diff_options(
        self,
        working_dir: Optional[Union[str, Path]] = None,
        raw: Optional[bool] = None,
        max_output_bytes: Optional[int] = None,
    ) -> DiffOptions:
        """
        Build diff options from this configuration.

        Explicit arguments take precedence over configured values.
        """
        return DiffOptions(
            working_dir=working_dir,
            raw=self.raw if raw is None else raw,
            max_output_bytes=(
                self.max_output_bytes if max_output_bytes is None else max_output_bytes
            ),
            git_executable=self.git_executable,
        )


def get_default_config_path() -> Path:
    """Get the default global config file path."""
    return Path.home() / ".gitdiff" / "config.yml"


def get_project_config_path() -> Path:
    """Get the project-local config file path."""
    return Path.cwd() / ".gitdiff.yml"
