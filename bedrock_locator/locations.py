"""
Locate Bedrock's data (save) and asset directories on the current platform.

Data locations

    Windows  %LOCALAPPDATA%/Packages/Microsoft.MinecraftUWP_8wekyb3d8bbwe/LocalState/games/com.mojang
    MacOS    $HOME/Library/Application Support/mcpelauncher/games/com.mojang
    Linux    $HOME/.local/share/mcpelauncher/games/com.mojang
             $HOME/.var/app/io.mrarm.mcpelauncher/data/mcpelauncher/games/com.mojang
    Android  /data/data/com.mojang.minecraftpe/games/com.mojang
             /sdcard/games/com.mojang

Asset locations

    Windows  {AppxPackage.InstallLocation}/data
    MacOS    $HOME/Library/Application Support/mcpelauncher/versions/{CurrentVersion}/assets
    Linux    $HOME/.local/share/mcpelauncher/versions/{CurrentVersion}/assets
             $HOME/.var/app/io.mrarm.mcpelauncher/data/mcpelauncher/versions/{CurrentVersion}/assets

Android assets live inside the installed .apk, so there is no directory to
report. `adb shell pm path com.mojang.minecraftpe` lists the apk files.
"""
from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Awaitable, Callable, Dict, Iterable, List, Optional

import aiofiles.os

from bedrock_locator.core.dependencies import get_platform, get_settings
from bedrock_locator.domain.errors import (
    ASSET_FILES,
    DATA_FILES,
    MissingEnvironmentError,
    NoLocationsFoundError,
    PackageQueryError,
    UnsupportedPlatformError,
    could_not_locate,
)
from bedrock_locator.domain.models import LocatorSettings, Platform
from bedrock_locator.services.appx import get_appx_package
from bedrock_locator.services.mcpelauncher import get_assets_location

logger = logging.getLogger(__name__)

LOCAL_APP_DATA_ENV_VAR = "LOCALAPPDATA"
WINDOWS_DATA_SUBPATH = "Packages/Microsoft.MinecraftUWP_8wekyb3d8bbwe/LocalState/games/com.mojang"
WINDOWS_ASSETS_SUBPATH = "data"
COM_MOJANG_SUBPATH = "games/com.mojang"

MACOS_LAUNCHER_SUBPATHS = ["Library/Application Support/mcpelauncher"]
LINUX_LAUNCHER_SUBPATHS = [
    ".local/share/mcpelauncher",
    # Flatpak
    ".var/app/io.mrarm.mcpelauncher/data/mcpelauncher",
]
ANDROID_DATA_PATHS = [
    "/data/data/com.mojang.minecraftpe/games/com.mojang",
    "/sdcard/games/com.mojang",
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _resolve_platform(platform: Optional[str], supported: Iterable[Platform], kind: str) -> Platform:
    """Map a platform name onto one of the supported platforms."""
    supported = list(supported)
    name = platform or get_platform()
    try:
        resolved = Platform(name)
    except ValueError:
        resolved = None
    if resolved not in supported:
        raise UnsupportedPlatformError(name, [p.label for p in supported], kind)
    return resolved


async def _filter_existing(paths: List[Path]) -> List[Path]:
    exists = await asyncio.gather(*(aiofiles.os.path.exists(p) for p in paths))
    return [p for p, ok in zip(paths, exists) if ok]


async def check_exists(paths: List[Path], kind: str = DATA_FILES) -> List[Path]:
    """
    Filter out paths that don't exist.

    Raises NoLocationsFoundError if none is left.
    """
    existing = await _filter_existing(paths)
    logger.debug(f"{len(existing)} of {len(paths)} candidate(s) exist: {[str(p) for p in existing]}")
    if not existing:
        raise NoLocationsFoundError(paths, kind)
    return existing


async def _gather_all(aws: Iterable[Awaitable[Path]]) -> List[Path]:
    """
    Run the awaitables concurrently and return their results in order.

    The first failure cancels the rest and is re-raised.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    if not tasks:
        return []
    try:
        return list(await asyncio.gather(*tasks))
    except Exception:
        for task in tasks:
            task.cancel()
        # Let the cancelled tasks finish so no exception goes unretrieved.
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


# ---------------------------------------------------------------------------
# Data locations
# ---------------------------------------------------------------------------


def get_data_locations_windows() -> List[Path]:
    local_app_data = os.environ.get(LOCAL_APP_DATA_ENV_VAR)
    if not local_app_data:
        raise MissingEnvironmentError(LOCAL_APP_DATA_ENV_VAR, DATA_FILES)
    return [Path(local_app_data) / WINDOWS_DATA_SUBPATH]


def get_data_locations_macos() -> List[Path]:
    home = Path.home()
    return [home / sub / COM_MOJANG_SUBPATH for sub in MACOS_LAUNCHER_SUBPATHS]


def get_data_locations_linux() -> List[Path]:
    home = Path.home()
    return [home / sub / COM_MOJANG_SUBPATH for sub in LINUX_LAUNCHER_SUBPATHS]


def get_data_locations_android() -> List[Path]:
    return [Path(p) for p in ANDROID_DATA_PATHS]


DATA_LOCATIONS: Dict[Platform, Callable[[], List[Path]]] = {
    Platform.WINDOWS: get_data_locations_windows,
    Platform.MACOS: get_data_locations_macos,
    Platform.LINUX: get_data_locations_linux,
    Platform.ANDROID: get_data_locations_android,
}


async def get_data_locations(platform: Optional[str] = None) -> List[Path]:
    """
    Get the existing Bedrock data (com.mojang) directories for a platform.

    Args:
        platform: sys.platform style name; defaults to the current host.

    Returns:
        A non-empty list of existing directories, most likely first.
    """
    resolved = _resolve_platform(platform, DATA_LOCATIONS, DATA_FILES)
    candidates = DATA_LOCATIONS[resolved]()
    logger.debug(f"Data location candidates for {resolved.value}: {[str(p) for p in candidates]}")
    return await check_exists(candidates, DATA_FILES)


# ---------------------------------------------------------------------------
# Asset locations
# ---------------------------------------------------------------------------


async def get_assets_locations_windows(settings: Optional[LocatorSettings]) -> List[Path]:
    """
    Since Bedrock on Windows is a Store package, its install location changes
    with each version; ask the package manager where it currently is.

    Settings are read from the environment here if the caller passed none.
    """
    settings = settings or get_settings()
    try:
        package = await get_appx_package(settings.package_name, settings)
    except PackageQueryError as e:
        raise PackageQueryError(
            f"{could_not_locate(ASSET_FILES)} The package details command returned the "
            f"following error:\n{e}"
        ) from e
    return [Path(package.install_location) / WINDOWS_ASSETS_SUBPATH]


async def get_assets_locations_mcpelauncher(roots: List[Path]) -> List[Path]:
    """Assets of the newest version in each existing mcpe-launcher root, in root order."""
    existing_roots = await _filter_existing(roots)
    logger.debug(f"mcpe-launcher roots found: {[str(p) for p in existing_roots]}")
    return await _gather_all(get_assets_location(root) for root in existing_roots)


async def get_assets_locations_macos(settings: Optional[LocatorSettings]) -> List[Path]:
    home = Path.home()
    return await get_assets_locations_mcpelauncher([home / sub for sub in MACOS_LAUNCHER_SUBPATHS])


async def get_assets_locations_linux(settings: Optional[LocatorSettings]) -> List[Path]:
    home = Path.home()
    return await get_assets_locations_mcpelauncher([home / sub for sub in LINUX_LAUNCHER_SUBPATHS])


ASSETS_LOCATIONS: Dict[Platform, Callable[[Optional[LocatorSettings]], Awaitable[List[Path]]]] = {
    Platform.WINDOWS: get_assets_locations_windows,
    Platform.MACOS: get_assets_locations_macos,
    Platform.LINUX: get_assets_locations_linux,
}


async def get_assets_locations(
    platform: Optional[str] = None,
    settings: Optional[LocatorSettings] = None,
) -> List[Path]:
    """
    Get the existing Bedrock asset directories for a platform.

    Args:
        platform: sys.platform style name; defaults to the current host.
        settings: Locator settings; only Windows uses them, and reads them
            from the environment if omitted.

    Returns:
        A non-empty list of existing directories.
    """
    resolved = _resolve_platform(platform, ASSETS_LOCATIONS, ASSET_FILES)
    candidates = await ASSETS_LOCATIONS[resolved](settings)
    logger.debug(f"Asset location candidates for {resolved.value}: {[str(p) for p in candidates]}")
    return await check_exists(candidates, ASSET_FILES)
