"""Builder for programs that are already executable."""

import asyncio
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from verdict_engine.builders.base import (
    Builder,
    CompileError,
    create_artifact_path,
    make_executable,
)
from verdict_engine.builders.prebuilt.config import PrebuiltConfig

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class PrebuiltBuilder(Builder):
    """Copies an existing executable so the suite run can own the copy."""

    config: PrebuiltConfig

    @classmethod
    def from_config(cls, config: PrebuiltConfig) -> "PrebuiltBuilder":
        """Create builder from its configuration."""
        return cls(config=config)

    async def build(self, source: Path) -> Path:
        """Copy the executable into a fresh artifact."""
        if not source.is_file():
            raise CompileError(f"Executable not found: {source}")

        artifact = create_artifact_path(source, self.config.output_dir)
        try:
            await asyncio.to_thread(shutil.copyfile, source, artifact)
            make_executable(artifact)
        except OSError as e:
            artifact.unlink(missing_ok=True)
            raise CompileError(f"Failed to copy {source}: {e}") from e

        log.info("Copied %s -> %s", source, artifact)
        return artifact
