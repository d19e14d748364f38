import os
import sys

from pydantic import ValidationError

from bedrock_locator.domain.errors import LocatorConfigError
from bedrock_locator.domain.models import LocatorSettings

PACKAGE_NAME_ENV_VAR = "BEDROCK_LOCATOR_PACKAGE_NAME"
POWERSHELL_ENV_VAR = "BEDROCK_LOCATOR_POWERSHELL"
QUERY_TIMEOUT_ENV_VAR = "BEDROCK_LOCATOR_QUERY_TIMEOUT"


def get_settings() -> LocatorSettings:
    """
    Build the locator settings from defaults and environment overrides.

    A fresh object is returned on every call; nothing is cached between
    resolutions.
    """
    overrides = {}
    package_name = os.environ.get(PACKAGE_NAME_ENV_VAR)
    if package_name:
        overrides["package_name"] = package_name
    powershell = os.environ.get(POWERSHELL_ENV_VAR)
    if powershell:
        overrides["powershell_executable"] = powershell
    timeout = os.environ.get(QUERY_TIMEOUT_ENV_VAR)
    if timeout:
        overrides["query_timeout_seconds"] = timeout

    try:
        return LocatorSettings(**overrides)
    except ValidationError as e:
        raise LocatorConfigError(f"Invalid locator settings in the environment: {e}") from e


def get_platform() -> str:
    # CPython before 3.13 reports "linux" on Android.
    if sys.platform == "linux" and hasattr(sys, "getandroidapilevel"):
        return "android"
    return sys.platform
