"""Loading of builders from entry points."""

from importlib.metadata import entry_points

from pydantic import BaseModel

from verdict_engine.builders.manifest import BuilderManifest

ENTRY_POINT_GROUP = "verdict_engine.builders"


class BuilderNotFoundError(Exception):
    """Raised when a builder is not found."""


class InvalidBuilderError(Exception):
    """Raised when a builder entry point does not resolve to a manifest."""


def available_builders() -> list[str]:
    """Return the registered builder keys, sorted."""
    return sorted({entry.name for entry in entry_points(group=ENTRY_POINT_GROUP)})


def load_builder_manifest(key: str) -> BuilderManifest[BaseModel]:
    """Load a builder manifest by key.

    Args:
        key: The builder key as registered in pyproject.toml
             (e.g., "gpp", "prebuilt")

    Returns:
        The builder manifest instance

    Raises:
        BuilderNotFoundError: If no builder with the given key is found
        InvalidBuilderError: If the entry point resolves to something else

    """
    entries = entry_points(group=ENTRY_POINT_GROUP).select(name=key)

    for entry in entries:
        manifest = entry.load()
        if not isinstance(manifest, BuilderManifest):
            raise InvalidBuilderError(
                f"Builder '{key}' entry point {entry.value} is not a builder "
                f"manifest (got {type(manifest).__name__})"
            )
        return manifest

    raise BuilderNotFoundError(
        f"Builder '{key}' not found. Available builders: {available_builders()}"
    )
