"""
Version selection for mcpe-launcher installations.

macOS and Linux have no official Bedrock release; the community
mcpe-launcher project installs each game version under
<root>/versions/<versionName> and lists them in <root>/versions/versions.ini:

    [1.20.81.01]
    versionCode=972008101
    versionName=1.20.81.01

The asset directory of the newest listed version is what the locator reports.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, Iterable, Optional

from bedrock_locator.domain.errors import MetadataInvalidError, MetadataUnreadableError
from bedrock_locator.domain.models import McpeVersion
from bedrock_locator.storage.ini_reader import read_ini

logger = logging.getLogger(__name__)

VERSIONS_DIR = "versions"
VERSIONS_INI = "versions.ini"
ASSETS_DIR = "assets"

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def _parse_int(value: Optional[str]) -> Optional[int]:
    """Parse the leading integer of a string, e.g. '12abc' -> 12. None if there is none."""
    if value is None:
        return None
    match = _LEADING_INT.match(value)
    if not match:
        return None
    return int(match.group(1))


def parse_version_section(section: Dict[str, str]) -> McpeVersion:
    """Build a version record from one versions.ini section."""
    return McpeVersion(
        version_code=_parse_int(section.get("versionCode")),
        version_name=section.get("versionName") or "",
    )


def select_latest_version(versions: Iterable[McpeVersion]) -> Optional[McpeVersion]:
    """
    Return the version with the greatest version code.

    The earliest entry wins a tie. Invalid records must be filtered out by the
    caller. Returns None if there are no versions.
    """
    latest: Optional[McpeVersion] = None
    for version in versions:
        if latest is None or version.version_code > latest.version_code:
            latest = version
    return latest


async def get_assets_location(root_install_path: Path) -> Path:
    """
    Get the assets directory of the most recent version in an mcpe-launcher
    installation.

    The returned path is not checked for existence.
    """
    root_install_path = Path(root_install_path)
    versions_ini_path = root_install_path / VERSIONS_DIR / VERSIONS_INI

    try:
        ini_data = await read_ini(versions_ini_path)
    except MetadataUnreadableError as e:
        logger.error(f"Failed to read {versions_ini_path}: {e.code}")
        raise

    versions = [
        v
        for v in (parse_version_section(section) for section in ini_data.sections.values())
        if v.is_valid
    ]
    logger.debug(f"Found {len(versions)} valid version(s) in {versions_ini_path}")

    latest = select_latest_version(versions)
    if latest is None:
        logger.error(f"No valid version entry in {versions_ini_path}")
        raise MetadataInvalidError(versions_ini_path)

    return root_install_path / VERSIONS_DIR / latest.version_name / ASSETS_DIR
