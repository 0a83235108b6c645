"""Prebuilt builder module."""

from verdict_engine.builders.prebuilt.builder import PrebuiltBuilder
from verdict_engine.builders.prebuilt.config import PrebuiltConfig
from verdict_engine.builders.prebuilt.manifest import prebuilt_manifest

__all__ = ["PrebuiltBuilder", "PrebuiltConfig", "prebuilt_manifest"]
