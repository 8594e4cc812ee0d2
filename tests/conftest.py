"""Pytest configuration and fixtures."""

from __future__ import annotations

import stat
import sys
import textwrap
from pathlib import Path

import pytest

from rtl_sensor_bridge.accessories.sink import InMemoryServiceFactory
from rtl_sensor_bridge.core.config import DeviceConfig, PlatformConfig


class FakeDecoder:
    """Stand-in for rtl_433: the current interpreter running a script.

    The script writes ``chunks`` to stdout one at a time, pausing
    ``delay`` after each, then exits with ``exit_code``.
    """

    def __init__(self, tmp_path: Path) -> None:
        self.tmp_path = tmp_path

    def _write_script(
        self, chunks: list[str], exit_code: int, delay: float, shebang: str = ""
    ) -> Path:
        script = self.tmp_path / "fake_rtl_433.py"
        body = textwrap.dedent(
            f"""
            import sys
            import time

            for chunk in {chunks!r}:
                sys.stdout.write(chunk)
                sys.stdout.flush()
                time.sleep({delay!r})
            sys.exit({exit_code!r})
            """
        )
        script.write_text(shebang + body)
        return script

    def command(
        self,
        chunks: list[str],
        exit_code: int = 0,
        delay: float = 0.0,
    ) -> tuple[str, list[str]]:
        script = self._write_script(chunks, exit_code, delay)
        return sys.executable, [str(script)]

    def executable(
        self,
        chunks: list[str],
        exit_code: int = 0,
        delay: float = 0.0,
    ) -> str:
        """Write the script as an executable that ignores rtl_433's arguments."""
        script = self._write_script(chunks, exit_code, delay, shebang=f"#!{sys.executable}\n")
        script.chmod(script.stat().st_mode | stat.S_IXUSR)
        return str(script)


@pytest.fixture
def fake_decoder(tmp_path: Path) -> FakeDecoder:
    """Provide a fake rtl_433 process builder."""
    return FakeDecoder(tmp_path)


@pytest.fixture
def service_factory() -> InMemoryServiceFactory:
    """Provide an in-memory host service factory."""
    return InMemoryServiceFactory()


@pytest.fixture
def patio_config() -> PlatformConfig:
    """Single battery-watched device with id 7."""
    return PlatformConfig(
        devices=[DeviceConfig(name="Patio", id=7, watch_battery=True)],
    )
