"""gitdiff - fetch git diff output safely, as text or raw bytes."""

__version__ = "0.1.0"

from gitdiff.config import DEFAULT_MAX_OUTPUT_BYTES, DiffOptions
from gitdiff.diff_fetcher import (
    STDERR_DECODE_PLACEHOLDER,
    DiffExecutionError,
    GitExitError,
    GitLaunchError,
    OutputTooLargeError,
    build_diff_args,
    fetch_diff,
)

__all__ = [
    "DEFAULT_MAX_OUTPUT_BYTES",
    "STDERR_DECODE_PLACEHOLDER",
    "DiffExecutionError",
    "DiffOptions",
    "GitExitError",
    "GitLaunchError",
    "OutputTooLargeError",
    "build_diff_args",
    "fetch_diff",
]
