"""Builder manifest definition for the plugin system."""

from collections.abc import Callable
from dataclasses import dataclass

from pydantic import BaseModel

from verdict_engine.builders.base import Builder


@dataclass(frozen=True, kw_only=True)
class BuilderManifest[ConfigT: BaseModel]:
    """Manifest describing a builder plugin.

    The manifest contains references to the configuration class and the
    builder factory function for lazy loading of builders based on their key.
    """

    config_cls: type[ConfigT]
    builder_factory: Callable[[ConfigT], Builder]
