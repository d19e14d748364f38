from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from bedrock_locator import locations
from bedrock_locator.core import dependencies
from bedrock_locator.domain.errors import (
    LocatorConfigError,
    MetadataInvalidError,
    MissingEnvironmentError,
    NoLocationsFoundError,
    PackageQueryError,
    UnsupportedPlatformError,
)
from bedrock_locator.domain.models import AppxPackage, LocatorSettings

from conftest import version_section, write_versions_ini

COM_MOJANG = Path("games") / "com.mojang"
MACOS_ROOT = Path("Library") / "Application Support" / "mcpelauncher"
LINUX_ROOT = Path(".local") / "share" / "mcpelauncher"
FLATPAK_ROOT = Path(".var") / "app" / "io.mrarm.mcpelauncher" / "data" / "mcpelauncher"


def _data(platform: str):
    return asyncio.run(locations.get_data_locations(platform))


def _assets(platform: str, settings: LocatorSettings = LocatorSettings()):
    return asyncio.run(locations.get_assets_locations(platform, settings))


@pytest.fixture
def local_app_data(tmp_path, monkeypatch) -> Path:
    path = tmp_path / "AppData" / "Local"
    path.mkdir(parents=True)
    monkeypatch.setenv("LOCALAPPDATA", str(path))
    return path


@pytest.fixture
def android_paths(tmp_path, monkeypatch):
    paths = [tmp_path / "data" / "com.mojang", tmp_path / "sdcard" / "com.mojang"]
    monkeypatch.setattr(locations, "ANDROID_DATA_PATHS", [str(p) for p in paths])
    return paths


# ---------------------------------------------------------------------------
# Data locations
# ---------------------------------------------------------------------------


def test_windows_data_location(local_app_data) -> None:
    expected = local_app_data / "Packages" / "Microsoft.MinecraftUWP_8wekyb3d8bbwe" / "LocalState" / COM_MOJANG
    expected.mkdir(parents=True)

    assert _data("win32") == [expected]


def test_windows_requires_local_app_data(monkeypatch) -> None:
    monkeypatch.delenv("LOCALAPPDATA", raising=False)

    with pytest.raises(MissingEnvironmentError) as excinfo:
        _data("win32")

    assert excinfo.value.variable == "LOCALAPPDATA"
    assert "LOCALAPPDATA" in str(excinfo.value)


def test_macos_data_location(home) -> None:
    expected = home / MACOS_ROOT / COM_MOJANG
    expected.mkdir(parents=True)

    assert _data("darwin") == [expected]


@pytest.mark.parametrize("root", [LINUX_ROOT, FLATPAK_ROOT])
def test_linux_data_location_single(home, root) -> None:
    expected = home / root / COM_MOJANG
    expected.mkdir(parents=True)

    assert _data("linux") == [expected]


def test_linux_data_locations_keep_candidate_order(home) -> None:
    native = home / LINUX_ROOT / COM_MOJANG
    flatpak = home / FLATPAK_ROOT / COM_MOJANG
    flatpak.mkdir(parents=True)
    native.mkdir(parents=True)

    assert _data("linux") == [native, flatpak]


def test_android_data_location(android_paths) -> None:
    android_paths[1].mkdir(parents=True)

    assert _data("android") == [android_paths[1]]


@pytest.mark.usefixtures("home", "local_app_data", "android_paths")
@pytest.mark.parametrize("platform", ["win32", "darwin", "linux", "android"])
def test_data_fails_when_nothing_exists(platform) -> None:
    with pytest.raises(NoLocationsFoundError) as excinfo:
        _data(platform)

    assert excinfo.value.paths
    assert "data files" in str(excinfo.value)


def test_data_unsupported_platform() -> None:
    with pytest.raises(UnsupportedPlatformError) as excinfo:
        _data("sunos5")

    assert excinfo.value.platform == "sunos5"
    assert "sunos5" in str(excinfo.value)
    assert "win32 (Windows)" in str(excinfo.value)


def test_data_defaults_to_host_platform(monkeypatch) -> None:
    monkeypatch.setattr(locations, "get_platform", lambda: "plan9")

    with pytest.raises(UnsupportedPlatformError, match="plan9"):
        asyncio.run(locations.get_data_locations())


# ---------------------------------------------------------------------------
# Asset locations
# ---------------------------------------------------------------------------


def test_linux_assets_location(home) -> None:
    root = home / LINUX_ROOT
    write_versions_ini(root, version_section("1.19.0", 1) + version_section("1.20.81", 2))
    expected = root / "versions" / "1.20.81" / "assets"
    expected.mkdir(parents=True)

    assert _assets("linux") == [expected]


def test_macos_assets_location(home) -> None:
    root = home / MACOS_ROOT
    write_versions_ini(root, version_section("1.20.81", 2))
    expected = root / "versions" / "1.20.81" / "assets"
    expected.mkdir(parents=True)

    assert _assets("darwin") == [expected]


def test_assets_from_each_launcher_root_in_order(home) -> None:
    native = home / LINUX_ROOT
    flatpak = home / FLATPAK_ROOT
    write_versions_ini(native, version_section("a", 1))
    write_versions_ini(flatpak, version_section("b", 5))
    expected = [native / "versions" / "a" / "assets", flatpak / "versions" / "b" / "assets"]
    for path in expected:
        path.mkdir(parents=True)

    assert _assets("linux") == expected


def test_assets_fail_fast_on_broken_launcher_root(home) -> None:
    broken = home / LINUX_ROOT
    working = home / FLATPAK_ROOT
    write_versions_ini(broken, "[a]\nversionCode=nope\nversionName=a\n")
    write_versions_ini(working, version_section("b", 1))
    (working / "versions" / "b" / "assets").mkdir(parents=True)

    with pytest.raises(MetadataInvalidError) as excinfo:
        _assets("linux")

    assert excinfo.value.path == broken / "versions" / "versions.ini"


def test_assets_fail_when_selected_version_is_missing(home) -> None:
    write_versions_ini(home / LINUX_ROOT, version_section("gone", 1))

    with pytest.raises(NoLocationsFoundError) as excinfo:
        _assets("linux")

    assert excinfo.value.paths == [home / LINUX_ROOT / "versions" / "gone" / "assets"]


@pytest.mark.usefixtures("home")
@pytest.mark.parametrize("platform", ["darwin", "linux"])
def test_assets_fail_without_launcher(platform) -> None:
    with pytest.raises(NoLocationsFoundError) as excinfo:
        _assets(platform)

    assert "asset files" in str(excinfo.value)


@pytest.mark.parametrize("platform", ["android", "sunos5"])
def test_assets_unsupported_platform(platform) -> None:
    with pytest.raises(UnsupportedPlatformError) as excinfo:
        _assets(platform)

    assert excinfo.value.platform == platform
    assert "android" not in excinfo.value.supported


def test_windows_assets_location(tmp_path, monkeypatch) -> None:
    install = tmp_path / "WindowsApps" / "Microsoft.MinecraftUWP_1.20.8101.0_x64__8wekyb3d8bbwe"
    (install / "data").mkdir(parents=True)
    requested = []

    async def fake_get_appx_package(name, settings=None):
        requested.append(name)
        return AppxPackage(Name=name, InstallLocation=str(install))

    monkeypatch.setattr(locations, "get_appx_package", fake_get_appx_package)

    assert _assets("win32") == [install / "data"]
    assert requested == ["Microsoft.MinecraftUWP"]


def test_windows_assets_location_missing_data_dir(tmp_path, monkeypatch) -> None:
    async def fake_get_appx_package(name, settings=None):
        return AppxPackage(Name=name, InstallLocation=str(tmp_path))

    monkeypatch.setattr(locations, "get_appx_package", fake_get_appx_package)

    with pytest.raises(NoLocationsFoundError):
        _assets("win32")


def test_windows_assets_wraps_query_error(monkeypatch) -> None:
    async def fake_get_appx_package(name, settings=None):
        raise PackageQueryError("Package query for Microsoft.MinecraftUWP timed out after 0.5s")

    monkeypatch.setattr(locations, "get_appx_package", fake_get_appx_package)

    with pytest.raises(PackageQueryError) as excinfo:
        _assets("win32")

    message = str(excinfo.value)
    assert message.startswith("Could not determine the location of Bedrock's asset files.")
    assert "timed out after 0.5s" in message
    assert isinstance(excinfo.value.__cause__, PackageQueryError)


def test_assets_failure_cancels_other_launcher_roots(home, monkeypatch) -> None:
    broken = home / LINUX_ROOT
    slow = home / FLATPAK_ROOT
    broken.mkdir(parents=True)
    slow.mkdir(parents=True)
    cancelled = []

    async def fake_get_assets_location(root):
        if root == broken:
            raise MetadataInvalidError(root / "versions" / "versions.ini")
        try:
            await asyncio.sleep(3600)
        except asyncio.CancelledError:
            cancelled.append(root)
            raise
        return root / "versions" / "late" / "assets"

    monkeypatch.setattr(locations, "get_assets_location", fake_get_assets_location)

    with pytest.raises(MetadataInvalidError) as excinfo:
        _assets("linux")

    assert excinfo.value.path == broken / "versions" / "versions.ini"
    assert cancelled == [slow]


def test_launcher_assets_ignore_bad_settings_overrides(home, monkeypatch) -> None:
    monkeypatch.setenv(dependencies.QUERY_TIMEOUT_ENV_VAR, "soon")
    root = home / LINUX_ROOT
    write_versions_ini(root, version_section("1.20.81", 2))
    expected = root / "versions" / "1.20.81" / "assets"
    expected.mkdir(parents=True)

    assert asyncio.run(locations.get_assets_locations("linux")) == [expected]


def test_windows_assets_read_settings_from_environment(monkeypatch) -> None:
    monkeypatch.setenv(dependencies.QUERY_TIMEOUT_ENV_VAR, "soon")

    with pytest.raises(LocatorConfigError):
        asyncio.run(locations.get_assets_locations("win32"))
