"""g++ builder manifest."""

from verdict_engine.builders.gpp.builder import GppBuilder
from verdict_engine.builders.gpp.config import GppConfig
from verdict_engine.builders.manifest import BuilderManifest

gpp_manifest = BuilderManifest(
    config_cls=GppConfig,
    builder_factory=GppBuilder.from_config,
)
