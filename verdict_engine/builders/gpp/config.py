"""Configuration for the g++ builder."""

from collections.abc import Sequence
from pathlib import Path

from pydantic import BaseModel, Field


class GppConfig(BaseModel):
    """Configuration for compiling C++ sources with g++."""

    compiler: str = "g++"
    std: str = "c++17"
    flags: Sequence[str] = Field(default_factory=lambda: ["-O2"])
    # None places artifacts in the system temporary directory
    output_dir: Path | None = None
    timeout: float = Field(default=30.0, gt=0)
