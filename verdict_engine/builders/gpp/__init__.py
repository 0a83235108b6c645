"""g++ builder module."""

from verdict_engine.builders.gpp.builder import GppBuilder
from verdict_engine.builders.gpp.config import GppConfig
from verdict_engine.builders.gpp.manifest import gpp_manifest

__all__ = ["GppBuilder", "GppConfig", "gpp_manifest"]
