"""
Minimal INI reader for mcpe-launcher metadata files.

Supported syntax:
- blank lines and lines starting with ';' are ignored
- '[name]' opens a section; later pairs belong to it
- 'key=value' is split on the first '='; pairs before any header go to
  the global section

Values are kept as raw strings. Lines that are none of the above are
skipped.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Union

import aiofiles

from bedrock_locator.domain.errors import MetadataUnreadableError
from bedrock_locator.domain.models import IniData

logger = logging.getLogger(__name__)


def parse_ini(data: str) -> IniData:
    """Parse INI text into an IniData document."""
    global_section: Dict[str, str] = {}
    sections: Dict[str, Dict[str, str]] = {}
    current = global_section

    for line_number, line in enumerate(data.split("\n"), start=1):
        line = line.rstrip("\r")

        # Blank line or comment
        if not line or line.startswith(";"):
            continue

        if line.startswith("[") and line.endswith("]"):
            current = {}
            sections[line[1:-1]] = current
            continue

        key, sep, value = line.partition("=")
        if not sep:
            logger.debug(f"Skipping line {line_number} without '=': {line!r}")
            continue
        current[key] = value

    return IniData(global_section=global_section, sections=sections)


async def read_ini(path: Union[str, Path]) -> IniData:
    """
    Read and parse an INI file.

    Raises MetadataUnreadableError if the file cannot be opened or is not
    valid UTF-8.
    """
    path = Path(path)
    try:
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            data = await f.read()
    except OSError as e:
        raise MetadataUnreadableError(e.filename or path, e.errno, e.strerror or "") from e
    except UnicodeDecodeError as e:
        raise MetadataUnreadableError(path, None, str(e)) from e

    return parse_ini(data)
