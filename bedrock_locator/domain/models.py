"""
Pydantic models for the Bedrock locator.

This module defines the data models that cross a boundary in the locator:
- Supported host platforms
- Locator settings
- Windows package metadata returned by Get-AppxPackage
- mcpe-launcher INI documents and version records

Models parsed from external input are frozen once validated.
"""

from __future__ import annotations

from enum import Enum, IntEnum, IntFlag
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Platforms
# ---------------------------------------------------------------------------


class Platform(str, Enum):
    """Host platforms the locator knows about, keyed by their sys.platform name."""

    WINDOWS = "win32"
    MACOS = "darwin"
    LINUX = "linux"
    ANDROID = "android"

    @property
    def label(self) -> str:
        """Name used in error messages, e.g. 'win32 (Windows)'."""
        names = {Platform.WINDOWS: "Windows", Platform.MACOS: "MacOS"}
        if self in names:
            return f"{self.value} ({names[self]})"
        return self.value


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class LocatorSettings(BaseModel):
    """
    Tunables for the locator.

    Defaults match a standard Windows Store install of Bedrock; see
    bedrock_locator.core.dependencies.get_settings for environment overrides.
    """

    model_config = ConfigDict(frozen=True)

    package_name: str = Field(
        default="Microsoft.MinecraftUWP",
        min_length=1,
        description="Name of the Windows Store package passed to Get-AppxPackage.",
    )
    powershell_executable: str = Field(
        default="powershell.exe",
        min_length=1,
        description="PowerShell executable used to query the package manager.",
    )
    query_timeout_seconds: float = Field(
        default=0.5,
        gt=0,
        description="How long the package query may run before it is killed.",
    )


# ---------------------------------------------------------------------------
# Windows package metadata
# ---------------------------------------------------------------------------


class ProcessorArchitecture(IntEnum):
    """Windows.System.ProcessorArchitecture"""

    X86 = 0
    ARM = 5
    X64 = 9
    NEUTRAL = 11
    ARM64 = 12
    X86_ON_ARM64 = 14
    UNKNOWN = 65535


class PackageSignatureKind(IntEnum):
    """Windows.ApplicationModel.PackageSignatureKind"""

    NONE = 0
    DEVELOPER = 1
    ENTERPRISE = 2
    STORE = 3
    SYSTEM = 4


class AppxStatus(IntFlag):
    """Microsoft.Windows.Appx.PackageManager.Commands.AppxStatus"""

    OK = 0
    LICENSE_ISSUE = 1
    MODIFIED = 2
    TAMPERED = 4
    DISABLED = 8
    PACKAGE_OFFLINE = 16
    DEPLOYMENT_IN_PROGRESS = 32
    DEPENDENCY_ISSUE = 64
    DATA_OFFLINE = 128
    IS_PARTIALLY_STAGED = 256
    NOT_AVAILABLE = 512
    SERVICING = 1024
    NEEDS_REMEDIATION = 2048


class AppxPackage(BaseModel):
    """
    Microsoft.Windows.Appx.PackageManager.Commands.AppxPackage, as serialized
    by ConvertTo-Json.

    Only name and install_location are required. The locator consumes just
    install_location; the remaining fields are kept so callers can inspect
    the installed package.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(alias="Name", min_length=1)
    install_location: str = Field(
        alias="InstallLocation",
        min_length=1,
        description="Directory the package is currently installed in. Changes with every update.",
    )
    publisher: Optional[str] = Field(default=None, alias="Publisher")
    publisher_id: Optional[str] = Field(default=None, alias="PublisherId")
    architecture: Optional[int] = Field(
        default=None,
        alias="Architecture",
        description="Raw ProcessorArchitecture value; see architecture_enum.",
    )
    resource_id: Optional[str] = Field(default=None, alias="ResourceId")
    version: Optional[str] = Field(default=None, alias="Version")
    package_family_name: Optional[str] = Field(default=None, alias="PackageFamilyName")
    package_full_name: Optional[str] = Field(default=None, alias="PackageFullName")
    is_framework: Optional[bool] = Field(default=None, alias="IsFramework")
    package_user_information: List[Any] = Field(default_factory=list, alias="PackageUserInformation")
    is_resource_package: Optional[bool] = Field(default=None, alias="IsResourcePackage")
    is_bundle: Optional[bool] = Field(default=None, alias="IsBundle")
    is_development_mode: Optional[bool] = Field(default=None, alias="IsDevelopmentMode")
    non_removable: Optional[bool] = Field(default=None, alias="NonRemovable")
    dependencies: List[Any] = Field(default_factory=list, alias="Dependencies")
    is_partially_staged: Optional[bool] = Field(default=None, alias="IsPartiallyStaged")
    signature_kind: Optional[int] = Field(
        default=None,
        alias="SignatureKind",
        description="Raw PackageSignatureKind value; see signature_kind_enum.",
    )
    status: Optional[int] = Field(
        default=None,
        alias="Status",
        ge=0,
        description="Raw AppxStatus flag value; see status_flags.",
    )

    @property
    def architecture_enum(self) -> Optional[ProcessorArchitecture]:
        """None when missing or not a value this module knows about."""
        try:
            return ProcessorArchitecture(self.architecture)
        except ValueError:
            return None

    @property
    def signature_kind_enum(self) -> Optional[PackageSignatureKind]:
        try:
            return PackageSignatureKind(self.signature_kind)
        except ValueError:
            return None

    @property
    def status_flags(self) -> Optional[AppxStatus]:
        if self.status is None:
            return None
        return AppxStatus(self.status)


# ---------------------------------------------------------------------------
# mcpe-launcher metadata
# ---------------------------------------------------------------------------


class IniData(BaseModel):
    """
    A parsed INI document.

    global_section holds the key/value pairs that appear before the first
    section header; sections maps each header name to its own pairs.
    """

    model_config = ConfigDict(frozen=True)

    global_section: Dict[str, str] = Field(default_factory=dict)
    sections: Dict[str, Dict[str, str]] = Field(default_factory=dict)


class McpeVersion(BaseModel):
    """One installed game version listed in an mcpe-launcher versions.ini file."""

    model_config = ConfigDict(frozen=True)

    version_code: Optional[int] = Field(
        default=None,
        description="Numeric version code; None when missing or not a number.",
    )
    version_name: str = Field(
        default="",
        description="Directory name of the version under <root>/versions.",
    )

    @property
    def is_valid(self) -> bool:
        return self.version_code is not None and bool(self.version_name)
