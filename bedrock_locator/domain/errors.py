"""
Exception types raised while locating Bedrock's data and asset directories.

Every failure derives from LocatorError so callers can catch the whole family
with a single except clause. Each subclass keeps the context needed to
diagnose the problem (platform, paths, wrapped error codes) as attributes.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Union

DATA_FILES = "data files"
ASSET_FILES = "asset files"


def could_not_locate(kind: str) -> str:
    """Common message prefix for every location failure."""
    return f"Could not determine the location of Bedrock's {kind}."


class LocatorError(Exception):
    """Base class for all location errors."""


class LocatorConfigError(LocatorError):
    """An environment override for the locator settings is invalid."""


class UnsupportedPlatformError(LocatorError):
    def __init__(self, platform: str, supported: Iterable[str], kind: str = DATA_FILES):
        self.platform = platform
        self.supported = list(supported)
        super().__init__(
            f"{could_not_locate(kind)} The current platform ({platform}) is not supported. "
            f"Supported platforms: {', '.join(self.supported)}"
        )


class MissingEnvironmentError(LocatorError):
    def __init__(self, variable: str, kind: str = DATA_FILES):
        self.variable = variable
        super().__init__(
            f"{could_not_locate(kind)} The {variable} environment variable is missing."
        )


class NoLocationsFoundError(LocatorError):
    def __init__(self, paths: Iterable[Union[str, Path]], kind: str = DATA_FILES):
        self.paths: List[Path] = [Path(p) for p in paths]
        tried = "\n".join(f"  {p}" for p in self.paths) or "  (none)"
        super().__init__(
            f"{could_not_locate(kind)} The game is not installed or is installed in an "
            f"unsupported location.\nTried:\n{tried}"
        )


class PackageQueryError(LocatorError):
    """The PowerShell package query failed, timed out, or returned unusable output."""


class MetadataUnreadableError(LocatorError):
    def __init__(self, path: Union[str, Path], code: Optional[Union[int, str]] = None, reason: str = ""):
        self.path = Path(path)
        self.code = code
        message = (
            f"{could_not_locate(ASSET_FILES)} There was an error reading the mcpe-launcher "
            f"versions.ini file.\nPath: {self.path}\nCode: {code}"
        )
        if reason:
            message += f"\nReason: {reason}"
        super().__init__(message)


class MetadataInvalidError(LocatorError):
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(
            f"{could_not_locate(ASSET_FILES)} The mcpe-launcher versions file did not contain a "
            f"valid version (or the format has been changed).\nPath: {self.path}"
        )
