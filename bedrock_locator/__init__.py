"""
Locate Minecraft: Bedrock Edition's data and asset directories.

This package is responsible for:
* Enumerating the per-platform candidate directories for save data.
* Finding the asset directory of the installed game, either through the
  Windows package manager or from mcpe-launcher's versions.ini.
* Dropping candidates that don't exist and raising a descriptive
  LocatorError when nothing is left.
"""

from bedrock_locator.domain.errors import (
    LocatorConfigError,
    LocatorError,
    MetadataInvalidError,
    MetadataUnreadableError,
    MissingEnvironmentError,
    NoLocationsFoundError,
    PackageQueryError,
    UnsupportedPlatformError,
)
from bedrock_locator.locations import get_assets_locations, get_data_locations

__all__ = [
    "LocatorConfigError",
    "LocatorError",
    "MetadataInvalidError",
    "MetadataUnreadableError",
    "MissingEnvironmentError",
    "NoLocationsFoundError",
    "PackageQueryError",
    "UnsupportedPlatformError",
    "get_assets_locations",
    "get_data_locations",
]
