"""Prebuilt builder manifest."""

from verdict_engine.builders.manifest import BuilderManifest
from verdict_engine.builders.prebuilt.builder import PrebuiltBuilder
from verdict_engine.builders.prebuilt.config import PrebuiltConfig

prebuilt_manifest = BuilderManifest(
    config_cls=PrebuiltConfig,
    builder_factory=PrebuiltBuilder.from_config,
)
