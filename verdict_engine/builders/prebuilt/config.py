"""Configuration for the prebuilt builder."""

from pathlib import Path

from pydantic import BaseModel


class PrebuiltConfig(BaseModel):
    """Configuration for running an already compiled program."""

    output_dir: Path | None = None
