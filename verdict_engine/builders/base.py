"""Abstract base class for build steps producing executable artifacts."""

import logging
import os
import stat
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

log = logging.getLogger(__name__)


class CompileError(Exception):
    """Raised when a source file cannot be turned into an executable.

    The diagnostic is kept verbatim so it can be shown to the user as-is.
    """

    def __init__(self, diagnostic: str) -> None:
        super().__init__(diagnostic)
        self.diagnostic = diagnostic


@dataclass(frozen=True, kw_only=True)
class Builder(ABC):
    """Abstract base for build steps.

    A builder hands over a freshly created artifact: the caller owns the
    returned path and is responsible for deleting it.
    """

    @abstractmethod
    async def build(self, source: Path) -> Path:
        """Produce an executable artifact from the given source.

        Args:
            source: Path to the source file

        Returns:
            Path to a newly created executable

        Raises:
            CompileError: If no executable could be produced

        """


def create_artifact_path(source: Path, output_dir: Path | None = None) -> Path:
    """Reserve a unique artifact path named after the source file."""
    fd, name = tempfile.mkstemp(
        prefix=f"{source.stem}-",
        suffix=".exe" if os.name == "nt" else "",
        dir=output_dir,
    )
    os.close(fd)
    log.debug("Reserved artifact path %s", name)
    return Path(name)


def make_executable(path: Path) -> None:
    """Add execute permission for the owner."""
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
