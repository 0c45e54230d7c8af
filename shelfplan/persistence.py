"""
Distribution Persistence

Text form (one distribution per file):

    <name>
    Created Date: <ISO timestamp>
    Last Modified Date: <ISO timestamp or None>
    <cell>\t<cell>\t...      one line per grid row

An empty cell is written as the literal "null". Loading rebuilds the grid
and re-derives the name index from it; no index is ever stored.

JSON form is Distribution.to_dict() written with the standard json module.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from .config import CELL_SEPARATOR, CREATED_PREFIX, EMPTY_MARKER, MODIFIED_PREFIX
from .distribution import Distribution
from .exceptions import GridError, PersistenceError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def distribution_to_text(distribution: Distribution) -> str:
    """
    Render a distribution in the text form.

    Raises:
        PersistenceError: A product name would be ambiguous in the text form
    """
    for name in distribution.product_names():
        if name == EMPTY_MARKER or CELL_SEPARATOR in name or "\n" in name:
            raise PersistenceError(f"Product name {name!r} cannot be stored in text form")
    return str(distribution)


def _parse_timestamp(line: str, prefix: str, required: bool) -> Optional[datetime]:
    if not line.startswith(prefix):
        raise PersistenceError(f"Expected line starting with '{prefix}', got {line!r}")
    value = line[len(prefix):].strip()
    if value == "None" and not required:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise PersistenceError(f"Invalid timestamp {value!r}") from e


def distribution_from_text(text: str) -> Distribution:
    """
    Parse the text form.

    Raises:
        PersistenceError: Missing header lines, bad timestamps or a grid
            that is ragged or repeats a product
    """
    lines = text.rstrip("\n").split("\n")
    if len(lines) < 3:
        raise PersistenceError("Distribution text needs a name and two date lines")

    name = lines[0].strip()
    if not name:
        raise PersistenceError("Distribution name is empty")
    created = _parse_timestamp(lines[1], CREATED_PREFIX, required=True)
    modified = _parse_timestamp(lines[2], MODIFIED_PREFIX, required=False)

    grid: List[List[Optional[str]]] = []
    for line in lines[3:]:
        cells = line.rstrip(CELL_SEPARATOR).split(CELL_SEPARATOR)
        grid.append([None if cell == EMPTY_MARKER else cell for cell in cells])

    try:
        distribution = Distribution(name, grid) if grid else Distribution(name)
    except GridError as e:
        raise PersistenceError(f"Invalid grid for distribution '{name}': {e}") from e
    distribution.created_at = created
    distribution.modified_at = modified
    return distribution


def save_distribution(distribution: Distribution, filepath: PathLike) -> Path:
    """Write the text form, creating parent directories as needed."""
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(distribution_to_text(distribution), encoding="utf-8")
    logger.info("Saved distribution %s to %s", distribution.name, path)
    return path


def load_distribution(filepath: PathLike) -> Distribution:
    path = Path(filepath)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise PersistenceError(f"Cannot read {path}: {e}") from e
    distribution = distribution_from_text(text)
    logger.info("Loaded distribution %s from %s", distribution.name, path)
    return distribution


def save_distribution_json(distribution: Distribution, filepath: PathLike) -> Path:
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(distribution.to_dict(), f, indent=2)
    return path


def load_distribution_json(filepath: PathLike) -> Distribution:
    try:
        with open(filepath, 'r') as f:
            data = json.load(f)
        return Distribution.from_dict(data)
    except (OSError, json.JSONDecodeError, KeyError, GridError) as e:
        raise PersistenceError(f"Cannot load distribution from {filepath}: {e}") from e
