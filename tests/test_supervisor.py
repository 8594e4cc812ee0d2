"""Tests for rtl_433 process supervision (with a fake decoder process)."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest

from rtl_sensor_bridge.core.exceptions import DecoderProcessError
from rtl_sensor_bridge.decoders.rtl433 import (
    DecodedRecord,
    MalformedLine,
    NonJsonLine,
    ProcessSupervisor,
    StreamEvent,
    check_rtl433_available,
    kill_stale_instances,
    require_rtl433_available,
)

if TYPE_CHECKING:
    from conftest import FakeDecoder


class TestProcessSupervisor:
    """Tests for ProcessSupervisor."""

    def test_build_command_default_args(self) -> None:
        """Default command selects quiet JSON output in SI units."""
        supervisor = ProcessSupervisor(lambda event: None)
        cmd = supervisor.build_command()

        assert cmd[0] == "/usr/local/bin/rtl_433"
        assert cmd[1:] == ["-q", "-F", "json", "-C", "si"]

    def test_build_command_custom(self) -> None:
        supervisor = ProcessSupervisor(lambda event: None)
        assert supervisor.build_command("rtl_433", ["-F", "json"]) == ["rtl_433", "-F", "json"]

    def test_streams_events_in_order(self, fake_decoder: FakeDecoder) -> None:
        """Output of the process is decoded and delivered in order."""
        events: list[StreamEvent] = []
        command, args = fake_decoder.command(
            ['{"id":1,"tempe', 'rature_C":10}\nnot-json\n', '{"bad\n{"id":2}\n']
        )

        supervisor = ProcessSupervisor(events.append, kill_stale=False)
        handle = supervisor.start(command, args)

        assert handle is not None
        assert handle.wait(timeout=15)
        assert [type(e) for e in events] == [
            DecodedRecord,
            NonJsonLine,
            MalformedLine,
            DecodedRecord,
        ]
        assert events[0].record.temperature_c == 10
        assert events[3].record.id == 2

    def test_trailing_line_without_newline(self, fake_decoder: FakeDecoder) -> None:
        """The last line is delivered when the process closes stdout."""
        events: list[StreamEvent] = []
        command, args = fake_decoder.command(['{"id":3}'])

        handle = ProcessSupervisor(events.append, kill_stale=False).start(command, args)

        assert handle is not None
        assert handle.wait(timeout=15)
        assert len(events) == 1
        assert events[0].record.id == 3

    def test_exit_is_logged_not_restarted(
        self, fake_decoder: FakeDecoder, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Process exit is reported and the process is not respawned."""
        command, args = fake_decoder.command(['{"id":1}\n'], exit_code=3)
        supervisor = ProcessSupervisor(lambda event: None, kill_stale=False)

        with caplog.at_level(logging.INFO), patch(
            "rtl_sensor_bridge.decoders.rtl433.supervisor.subprocess.Popen",
            wraps=subprocess.Popen,
        ) as popen:
            handle = supervisor.start(command, args)
            assert handle is not None
            assert handle.wait(timeout=15)

        assert popen.call_count == 1
        assert handle.returncode == 3
        assert not handle.is_running()
        assert "disconnected" in caplog.text
        assert "exited with code 3" in caplog.text
        assert "closed (code 3)" in caplog.text

    def test_callback_errors_contained(
        self, fake_decoder: FakeDecoder, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A failing event handler does not stop the stream."""
        seen: list[StreamEvent] = []

        def on_event(event: StreamEvent) -> None:
            seen.append(event)
            if len(seen) == 1:
                raise RuntimeError("sink exploded")

        command, args = fake_decoder.command(['{"id":1}\n{"id":2}\n'])
        with caplog.at_level(logging.ERROR):
            handle = ProcessSupervisor(on_event, kill_stale=False).start(command, args)
            assert handle is not None
            assert handle.wait(timeout=15)

        assert len(seen) == 2
        assert "sink exploded" in caplog.text

    def test_spawn_failure_returns_none(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A missing binary is logged and not raised."""
        supervisor = ProcessSupervisor(lambda event: None, kill_stale=False)

        with caplog.at_level(logging.ERROR):
            handle = supervisor.start(str(tmp_path / "no-such-rtl_433"))

        assert handle is None
        assert supervisor.handle is None
        assert "rtl_433 error" in caplog.text

    def test_stop_terminates_process(self, fake_decoder: FakeDecoder) -> None:
        """shutdown stops a long-running process."""
        command, args = fake_decoder.command(['{"id":1}\n'] * 600, delay=0.1)
        supervisor = ProcessSupervisor(lambda event: None, kill_stale=False)
        handle = supervisor.start(command, args)

        assert handle is not None
        assert handle.is_running()

        supervisor.shutdown(timeout=5)

        assert not handle.is_running()
        assert handle.wait(timeout=5)

    def test_kill_stale_runs_before_spawn(self, fake_decoder: FakeDecoder) -> None:
        """Stale instances are killed by basename before spawning."""
        command, args = fake_decoder.command([])
        supervisor = ProcessSupervisor(lambda event: None, kill_stale=True)

        with patch(
            "rtl_sensor_bridge.decoders.rtl433.supervisor.kill_stale_instances"
        ) as kill:
            handle = supervisor.start(command, args)

        kill.assert_called_once_with(command)
        assert handle is not None
        handle.wait(timeout=15)


class TestKillStaleInstances:
    """Tests for kill_stale_instances."""

    def test_uses_pkill_on_basename(self) -> None:
        with patch("rtl_sensor_bridge.decoders.rtl433.supervisor.subprocess.run") as run:
            run.return_value = subprocess.CompletedProcess(args=[], returncode=1)
            kill_stale_instances("/usr/local/bin/rtl_433")

        assert run.call_args.args[0] == ["pkill", "-x", "rtl_433"]

    def test_missing_pkill_ignored(self) -> None:
        """A missing pkill binary is not an error."""
        with patch(
            "rtl_sensor_bridge.decoders.rtl433.supervisor.subprocess.run",
            side_effect=FileNotFoundError("pkill"),
        ):
            kill_stale_instances("rtl_433")


def test_check_rtl433_available() -> None:
    """check_rtl433_available should not crash."""
    assert isinstance(check_rtl433_available(), bool)
    assert check_rtl433_available("definitely-not-a-real-binary-xyz") is False


def test_require_rtl433_available_raises() -> None:
    """A missing binary raises DecoderProcessError with install hints."""
    with pytest.raises(DecoderProcessError, match="Cannot run decoder") as exc_info:
        require_rtl433_available("definitely-not-a-real-binary-xyz")
    assert exc_info.value.command == "definitely-not-a-real-binary-xyz"
