"""Loading of problem definitions from YAML files."""

import asyncio
import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from verdict_engine.models.problem import ProblemDefinition

log = logging.getLogger(__name__)


async def load_problem(path: Path) -> ProblemDefinition:
    """Load and validate a problem file.

    Args:
        path: Path to the problem YAML file

    Returns:
        Parsed problem definition

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is empty, not valid YAML, or fails validation

    """
    if not path.is_file():
        raise FileNotFoundError(f"Problem file not found: {path}")

    content = await asyncio.to_thread(path.read_text, encoding="utf-8")

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        raise ValueError(f"Empty problem file: {path}")

    try:
        definition = ProblemDefinition.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid problem definition schema in {path}: {e}") from e

    log.debug("Loaded %d test case(s) from %s", len(definition.tests), path)
    return definition
