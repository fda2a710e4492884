import json
import logging
from pathlib import Path
from typing import Any, Callable

import yaml

logger = logging.getLogger(__name__)

_PARSERS: dict[str, Callable[[str], Any]] = {
    ".yaml": yaml.safe_load,
    ".yml": yaml.safe_load,
    ".json": json.loads,
}


def load_file(path: Path) -> dict:
    """
    Read a console config file into a dict.

    Blank files and YAML documents holding only comments give an empty dict.

    :param path: Path to a .yaml, .yml or .json file.
    :return: The top-level mapping of the document.
    :raises FileNotFoundError: If nothing exists at path.
    :raises IsADirectoryError: If path is a directory.
    :raises RuntimeError: On an unsupported suffix or a document that is not a mapping.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path.absolute()}")
    if path.is_dir():
        raise IsADirectoryError(path.absolute())

    parse = _PARSERS.get(path.suffix.lower())
    if parse is None:
        raise RuntimeError("Invalid file type given: %s" % path.name)

    text = path.read_text(encoding="utf-8")
    if not text.strip():
        logger.debug("Config file %s is blank", path)
        return {}

    data = parse(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError("Config file must contain a mapping: %s" % path.name)
    logger.debug("Read %d setting(s) from %s", len(data), path)
    return data
