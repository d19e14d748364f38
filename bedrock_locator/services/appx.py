"""
Query installed Windows Store packages through PowerShell.

Bedrock on Windows is a Store package whose install location changes with
every update, so it has to be looked up from the package manager:

    Get-AppxPackage -Name Microsoft.MinecraftUWP | ConvertTo-Json -Compress

See: https://docs.microsoft.com/en-us/powershell/module/appx/get-appxpackage
"""
from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import subprocess
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from bedrock_locator.core.dependencies import get_settings
from bedrock_locator.domain.errors import PackageQueryError
from bedrock_locator.domain.models import AppxPackage, LocatorSettings

logger = logging.getLogger(__name__)


def _quote_powershell(value: str) -> str:
    """Quote a value as a PowerShell single-quoted string literal."""
    return "'" + value.replace("'", "''") + "'"


def build_command(name: str, powershell: str = "powershell.exe") -> List[str]:
    """Build the argument list that prints the named package as compact JSON."""
    script = (
        "& {"
        "[Console]::OutputEncoding = [System.Text.Encoding]::UTF8; "
        f"Get-AppxPackage -Name {_quote_powershell(name)} | ConvertTo-Json -Compress"
        "}"
    )
    return [
        powershell,
        "-NoLogo",
        "-NoProfile",
        "-NonInteractive",
        "-WindowStyle", "Hidden",
        "-Command", script,
    ]


def _subprocess_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {
        "stdin": subprocess.DEVNULL,
        "stdout": subprocess.PIPE,
        "stderr": subprocess.PIPE,
    }
    # Only defined on Windows; keeps a console window from flashing up.
    no_window = getattr(subprocess, "CREATE_NO_WINDOW", 0)
    if no_window:
        options["creationflags"] = no_window
    return options


def parse_package_json(stdout: str) -> AppxPackage:
    """
    Validate Get-AppxPackage JSON output against the AppxPackage schema.

    A one-element array is accepted as its element. Raises PackageQueryError
    for anything else that does not match.
    """
    try:
        payload = json.loads(stdout)
    except json.JSONDecodeError as e:
        raise PackageQueryError(f"Package query returned output that is not JSON: {e}") from e

    if isinstance(payload, list):
        if len(payload) != 1:
            raise PackageQueryError(
                f"Package query returned {len(payload)} packages, expected exactly one"
            )
        payload = payload[0]

    try:
        return AppxPackage.model_validate(payload)
    except ValidationError as e:
        raise PackageQueryError(f"Package query returned unexpected data: {e}") from e


async def get_appx_package(name: str, settings: Optional[LocatorSettings] = None) -> AppxPackage:
    """
    Get details about an installed Windows application package.

    Args:
        name: The name of the package (e.g. "Microsoft.MinecraftUWP").
        settings: Locator settings; read from the environment if omitted.

    Returns:
        The validated package metadata.

    Raises:
        PackageQueryError: PowerShell could not be started, exited with an
            error, timed out, wrote to stderr, or printed unusable output.
    """
    settings = settings or get_settings()
    command = build_command(name, settings.powershell_executable)
    timeout = settings.query_timeout_seconds
    logger.debug(f"Querying package {name} via {settings.powershell_executable}")

    try:
        process = await asyncio.create_subprocess_exec(*command, **_subprocess_options())
    except (OSError, NotImplementedError) as e:
        # NotImplementedError: the running event loop cannot spawn subprocesses
        # (SelectorEventLoop on Windows).
        reason = str(e) or type(e).__name__
        logger.warning(f"Failed to start {settings.powershell_executable}: {reason}")
        raise PackageQueryError(f"Failed to start {settings.powershell_executable}: {reason}") from e

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError as e:
        with contextlib.suppress(ProcessLookupError):
            process.kill()
        await process.wait()
        logger.warning(f"Package query for {name} timed out after {timeout}s")
        raise PackageQueryError(f"Package query for {name} timed out after {timeout}s") from e

    if process.returncode != 0:
        details = stderr.decode("utf-8", errors="replace").strip()
        logger.warning(f"Package query for {name} exited with code {process.returncode}")
        raise PackageQueryError(
            f"Package query for {name} exited with code {process.returncode}"
            + (f":\n{details}" if details else "")
        )

    if stderr:
        details = stderr.decode("utf-8", errors="replace").strip() or repr(stderr)
        logger.warning(f"Package query for {name} wrote to stderr: {details}")
        raise PackageQueryError(details)

    try:
        text = stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        raise PackageQueryError(f"Package query returned output that is not UTF-8: {e}") from e

    package = parse_package_json(text)
    logger.debug(f"Package {package.name} is installed at {package.install_location}")
    return package
