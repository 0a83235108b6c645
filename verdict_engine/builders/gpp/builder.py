"""g++ builder implementation."""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from verdict_engine.builders.base import Builder, CompileError, create_artifact_path
from verdict_engine.builders.gpp.config import GppConfig

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class GppBuilder(Builder):
    """Compiles a single C++ translation unit into a native executable."""

    config: GppConfig

    @classmethod
    def from_config(cls, config: GppConfig) -> "GppBuilder":
        """Create builder from its configuration."""
        return cls(config=config)

    async def build(self, source: Path) -> Path:
        """Compile the source into a fresh artifact."""
        if not source.is_file():
            raise CompileError(f"Source file not found: {source}")

        artifact = create_artifact_path(source, self.config.output_dir)
        try:
            await self._compile(source, artifact)
        except BaseException:
            artifact.unlink(missing_ok=True)
            raise

        log.info("Compiled %s -> %s", source, artifact)
        return artifact

    async def _compile(self, source: Path, artifact: Path) -> None:
        cmd = [
            self.config.compiler,
            "-o",
            str(artifact),
            str(source),
            f"-std={self.config.std}",
            *self.config.flags,
        ]
        log.info("Compiling: %s", " ".join(cmd))

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise CompileError(
                f"Failed to start compiler '{self.config.compiler}': "
                f"{e.strerror or e}"
            ) from e

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self.config.timeout
            )
        except TimeoutError:
            process.kill()
            await process.wait()
            raise CompileError(
                f"Compilation timed out after {self.config.timeout} seconds"
            ) from None

        if process.returncode != 0:
            diagnostic = (
                stderr.decode(errors="replace").strip()
                or stdout.decode(errors="replace").strip()
            )
            raise CompileError(
                diagnostic or f"Compiler exited with code {process.returncode}"
            )
