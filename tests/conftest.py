from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, List, Optional

import pytest

from bedrock_locator.core import dependencies


@pytest.fixture(autouse=True)
def _clean_locator_env(monkeypatch) -> None:
    for name in (
        dependencies.PACKAGE_NAME_ENV_VAR,
        dependencies.POWERSHELL_ENV_VAR,
        dependencies.QUERY_TIMEOUT_ENV_VAR,
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def home(tmp_path: Path, monkeypatch) -> Path:
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: home_dir))
    return home_dir


def write_versions_ini(root: Path, text: str) -> Path:
    versions_dir = root / "versions"
    versions_dir.mkdir(parents=True, exist_ok=True)
    ini_path = versions_dir / "versions.ini"
    ini_path.write_text(text, encoding="utf-8")
    return ini_path


def version_section(name: str, code: Any) -> str:
    return f"[{name}]\nversionCode={code}\nversionName={name}\n"


class FakeProcess:
    """Stand-in for asyncio.subprocess.Process."""

    def __init__(
        self,
        stdout: bytes = b"",
        stderr: bytes = b"",
        returncode: int = 0,
        hang: bool = False,
    ) -> None:
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode
        self.hang = hang
        self.killed = False

    async def communicate(self):
        if self.hang:
            await asyncio.sleep(3600)
        return self.stdout, self.stderr

    def kill(self) -> None:
        self.killed = True
        self.returncode = -9

    async def wait(self) -> int:
        return self.returncode


class FakePowerShell:
    def __init__(self) -> None:
        self.process: Optional[FakeProcess] = None
        self.error: Optional[BaseException] = None
        self.calls: List[tuple] = []

    async def __call__(self, *args, **kwargs):
        self.calls.append(args)
        if self.error is not None:
            raise self.error
        return self.process


@pytest.fixture
def fake_powershell(monkeypatch) -> Callable[..., FakePowerShell]:
    fake = FakePowerShell()
    monkeypatch.setattr(asyncio, "create_subprocess_exec", fake)

    def _install(process: Optional[FakeProcess] = None, error: Optional[BaseException] = None) -> FakePowerShell:
        fake.process = process
        fake.error = error
        return fake

    return _install
