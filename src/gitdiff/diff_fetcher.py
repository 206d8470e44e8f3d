"""Fetch ``git diff`` output without shell interpretation."""

import os
import subprocess
import tempfile
from collections.abc import Sequence
from typing import IO, Optional, Union

from gitdiff.config import DiffOptions

STDERR_DECODE_PLACEHOLDER = "<failed to decode stderr>"

_READ_CHUNK_SIZE = 64 * 1024

PathFilter = Union[str, os.PathLike]


class DiffExecutionError(Exception):
    """
    Raised when git diff cannot produce a result.

    Attributes:
        original: The underlying failure (OSError, CalledProcessError or BufferError)
        stderr: Decoded stderr text from git, or an empty string
    """

    def __init__(self, message: str, original: BaseException, stderr: str = ""):
        """
        Initialize diff execution error.

        Args:
            message: Composed error message
            original: The underlying failure
            stderr: Decoded stderr text
        """
        super().__init__(message)
        self.original = original
        self.stderr = stderr


class GitLaunchError(DiffExecutionError):
    """Raised when the git process could not be started."""


class GitExitError(DiffExecutionError):
    """Raised when git exits with a nonzero status or is killed by a signal."""

    @property
    def returncode(self) -> int:
        """Exit status reported by subprocess (negative for signals)."""
        return self.original.returncode


class OutputTooLargeError(DiffExecutionError):
    """Raised when git writes more than the configured number of bytes."""

    def __init__(self, message: str, original: BaseException, limit: int, stderr: str = ""):
        super().__init__(message, original, stderr)
        self.limit = limit


def build_diff_args(
    rev_range: Optional[str] = None,
    paths: Optional[Sequence[PathFilter]] = None,
) -> list[str]:
    """
    Build the argument vector for git diff (without the executable).

    Args:
        rev_range: Revision range such as "HEAD~1..HEAD"; omitted when empty
        paths: Path filters, placed after a "--" separator in the given order

    Returns:
        Argument list, e.g. ["--no-pager", "diff", "HEAD", "--", "a.txt"]

    Raises:
        TypeError: If rev_range is not a string, or paths is a single string
    """
    if rev_range is not None and not isinstance(rev_range, str):
        raise TypeError(f"rev_range must be a string, not {type(rev_range).__name__}")
    if isinstance(paths, (str, bytes)):
        raise TypeError("paths must be a sequence of paths, not a single string")

    args = ["--no-pager", "diff"]

    if rev_range:
        args.append(rev_range)

    if paths:
        args.append("--")
        args.extend(os.fspath(path) for path in paths)

    return args


def decode_stderr(stderr: bytes) -> str:
    """Decode git's stderr as UTF-8, falling back to a placeholder."""
    if not stderr:
        return ""
    try:
        return stderr.decode("utf-8")
    except UnicodeDecodeError:
        return STDERR_DECODE_PLACEHOLDER


def _compose_message(original: BaseException, stderr_text: str) -> str:
    message = f"git diff failed: {original}"
    if stderr_text:
        message += f"\nstderr:\n{stderr_text}"
    return message


def _read_limited(stream: IO[bytes], limit: int) -> Optional[bytes]:
    """Read a stream to EOF, returning None once more than limit bytes arrive."""
    chunks = []
    total = 0

    while True:
        chunk = stream.read(_READ_CHUNK_SIZE)
        if not chunk:
            break
        total += len(chunk)
        if total > limit:
            return None
        chunks.append(chunk)

    return b"".join(chunks)


def fetch_diff(
    rev_range: Optional[str] = None,
    paths: Optional[Sequence[PathFilter]] = None,
    options: Optional[DiffOptions] = None,
) -> Union[str, bytes]:
    """
    Run git diff and return its output.

    Without a revision range git compares the working tree against the index.
    The call blocks until git exits; the process is always reaped before
    this function returns or raises.

    No shell is involved, but git still parses its own arguments: a
    rev_range starting with "-" (e.g. "--output=/tmp/x") is read by git as
    an option. Callers passing untrusted ranges must reject or resolve
    them first (for example with ``git rev-parse --verify``). Paths are
    safe because they always follow "--".

    Args:
        rev_range: Revision range passed to git as a single argument
        paths: Path filters restricting the diff
        options: Invocation options (defaults to DiffOptions())

    Returns:
        Diff as UTF-8 text, or raw bytes when options.raw is set

    Raises:
        ValueError: If options are invalid
        TypeError: If rev_range or paths have the wrong type
        GitLaunchError: If git could not be started
        GitExitError: If git exited nonzero or was killed by a signal
        OutputTooLargeError: If output exceeded options.max_output_bytes
    """
    options = options or DiffOptions()

    errors = options.validate()
    if errors:
        raise ValueError("; ".join(errors))

    cmd = [options.git_executable, *build_diff_args(rev_range, paths)]

    with tempfile.TemporaryFile() as stderr_file:
        try:
            process = subprocess.Popen(
                cmd,
                cwd=options.working_dir,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=stderr_file,
            )
        except OSError as e:
            raise GitLaunchError(_compose_message(e, ""), e) from e

        with process:
            stdout = _read_limited(process.stdout, options.max_output_bytes)
            if stdout is None:
                process.kill()
            returncode = process.wait()

        stderr_file.seek(0)
        stderr = stderr_file.read()

    stderr_text = decode_stderr(stderr)

    if stdout is None:
        overflow = BufferError(f"stdout exceeded {options.max_output_bytes} bytes")
        raise OutputTooLargeError(
            _compose_message(overflow, stderr_text),
            overflow,
            limit=options.max_output_bytes,
            stderr=stderr_text,
        ) from overflow

    if returncode != 0:
        failure = subprocess.CalledProcessError(returncode, cmd, output=stdout, stderr=stderr)
        raise GitExitError(
            _compose_message(failure, stderr_text), failure, stderr=stderr_text
        ) from failure

    if options.raw:
        return stdout
    return stdout.decode("utf-8", errors="replace")
