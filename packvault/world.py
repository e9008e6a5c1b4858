"""World folder resolution from the server's properties file."""

import logging
from pathlib import Path

from packvault.errors import WorldPropertiesError

logger = logging.getLogger(__name__)

LEVEL_NAME_KEY = "level-name"


def parse_properties(text: str) -> dict[str, str]:
    """Parse key=value lines, ignoring blanks and # / ! comments.

    Whitespace around keys and values is trimmed. Later keys win.
    """
    properties: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()

        # Skip blanks and comments
        if not line or line.startswith(("#", "!")):
            continue

        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        properties[key.strip()] = value.strip()

    return properties


def read_level_name(properties_path: Path) -> str:
    """Return the level-name configured in the properties file.

    Raises:
        FileNotFoundError: If the properties file doesn't exist
        WorldPropertiesError: If level-name is missing or empty
    """
    if not properties_path.is_file():
        raise FileNotFoundError(f"Properties file not found: {properties_path}")

    properties = parse_properties(properties_path.read_text(encoding="utf-8", errors="replace"))
    if LEVEL_NAME_KEY not in properties:
        raise WorldPropertiesError(f"{LEVEL_NAME_KEY} not found in {properties_path}")

    level_name = properties[LEVEL_NAME_KEY]
    if not level_name:
        raise WorldPropertiesError(f"{LEVEL_NAME_KEY} is empty in {properties_path}")
    return level_name


def resolve_world_folder(properties_path: Path, worlds_dir: Path) -> Path:
    """Return the folder of the world the server is configured to load."""
    world_folder = worlds_dir / read_level_name(properties_path)
    logger.debug(f"Resolved world folder: {world_folder}")
    return world_folder
