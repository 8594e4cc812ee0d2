"""rtl_433 process supervision.

Spawns the decoder once, streams its stdout through the line decoder on a
background thread and reports lifecycle events. The process is never
respawned; liveness is left to the service manager running the bridge.
"""

from __future__ import annotations

import logging
import shutil
import signal
import subprocess
import threading
from collections.abc import Callable, Sequence
from pathlib import Path

from rtl_sensor_bridge.core.config import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_RTL433_PATH,
    RTL433_ARGS,
    STOP_TIMEOUT_SECONDS,
)
from rtl_sensor_bridge.core.exceptions import DecoderProcessError
from rtl_sensor_bridge.decoders.rtl433.models import StreamEvent
from rtl_sensor_bridge.decoders.rtl433.stream import StreamDecoder, iter_events

logger = logging.getLogger(__name__)

EventCallback = Callable[[StreamEvent], None]


def check_rtl433_available(command: str = DEFAULT_RTL433_PATH) -> bool:
    """Check if the rtl_433 binary can be executed.

    Args:
        command: Absolute path or name looked up in PATH.

    Returns:
        True if the binary is found and executable.
    """
    return shutil.which(command) is not None


def require_rtl433_available(command: str = DEFAULT_RTL433_PATH) -> None:
    """Fail early when the rtl_433 binary is missing.

    Raises:
        DecoderProcessError: If the binary is not found.
    """
    if not check_rtl433_available(command):
        raise DecoderProcessError(
            command,
            "not found. Install with: brew install rtl_433 (macOS) or apt install rtl-433 (Linux)",
        )


def kill_stale_instances(command: str) -> None:
    """Best-effort kill of leftover decoder processes.

    A second rtl_433 cannot open the same receiver, so any instance left
    over from a previous run is terminated first.

    Args:
        command: Decoder command; only its basename is matched.
    """
    name = Path(command).name
    try:
        result = subprocess.run(
            ["pkill", "-x", name],
            capture_output=True,
            check=False,
            timeout=STOP_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug("Could not kill stale %s instances: %s", name, e)
        return

    # pkill exits 1 when nothing matched
    if result.returncode == 0:
        logger.info("Killed stale %s instance(s)", name)


class ProcessHandle:
    """Running decoder process and the thread reading its output.

    Attributes:
        process: Underlying Popen object.
        command: Full command line that was spawned.
    """

    def __init__(
        self,
        process: subprocess.Popen[bytes],
        command: list[str],
        on_event: EventCallback,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self.process = process
        self.command = command
        self._on_event = on_event
        self._chunk_size = chunk_size
        self._stopping = False
        self._thread = threading.Thread(
            target=self._read_loop,
            name=f"rtl433-reader-{process.pid}",
            daemon=True,
        )

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def returncode(self) -> int | None:
        return self.process.returncode

    def start_reading(self) -> None:
        self._thread.start()

    def is_running(self) -> bool:
        """Check if the decoder process is still alive."""
        return self.process.poll() is None

    def wait(self, timeout: float | None = None) -> bool:
        """Wait until the output stream has been fully consumed.

        Args:
            timeout: Seconds to wait; None waits forever.

        Returns:
            True if the reader finished within the timeout.
        """
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def stop(self, timeout: float = STOP_TIMEOUT_SECONDS) -> None:
        """Stop the decoder process gracefully."""
        self._stopping = True

        if self.is_running():
            logger.info("Stopping rtl_433 (PID: %d)...", self.pid)
            try:
                self.process.send_signal(signal.SIGTERM)
                self.process.wait(timeout=timeout)
                logger.info("rtl_433 stopped gracefully")
            except subprocess.TimeoutExpired:
                logger.warning("rtl_433 didn't stop gracefully, killing...")
                self.process.kill()
                self.process.wait()

        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    def _read_loop(self) -> None:
        stdout = self.process.stdout
        if stdout is None:
            logger.error("rtl_433 error: stdout is not a pipe")
            return

        try:
            for event in iter_events(stdout, self._chunk_size, StreamDecoder()):
                self._deliver(event)
        except (OSError, ValueError) as e:
            # ValueError: read on a pipe closed underneath us
            logger.error("rtl_433 error: %s", e)

        if not self._stopping:
            logger.error("rtl_433 disconnected: stdout closed")

        code = self.process.wait()
        if self._stopping:
            logger.info("rtl_433 exited with code %s", code)
        else:
            logger.error("rtl_433 exited with code %s", code)

        stdout.close()
        if self._stopping:
            logger.info("rtl_433 closed (code %s)", code)
        else:
            logger.error("rtl_433 closed (code %s)", code)

    def _deliver(self, event: StreamEvent) -> None:
        try:
            self._on_event(event)
        except Exception:
            logger.exception("Failed to handle decoder event: %r", event)


class ProcessSupervisor:
    """Owns the rtl_433 subprocess.

    Example:
        >>> supervisor = ProcessSupervisor(dispatcher.handle)
        >>> handle = supervisor.start()
        >>> ...
        >>> supervisor.shutdown()

    Attributes:
        kill_stale: Kill leftover decoder instances before spawning.
        args: Decoder arguments used when start() is given none.
        handle: Handle of the spawned process, if any.
    """

    def __init__(
        self,
        on_event: EventCallback,
        kill_stale: bool = True,
        args: Sequence[str] = RTL433_ARGS,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self.on_event = on_event
        self.kill_stale = kill_stale
        self.args = tuple(args)
        self.chunk_size = chunk_size
        self.handle: ProcessHandle | None = None

    def build_command(
        self,
        command: str = DEFAULT_RTL433_PATH,
        args: Sequence[str] | None = None,
    ) -> list[str]:
        """Build the decoder command line.

        Args:
            command: Decoder binary.
            args: Arguments; defaults to the supervisor arguments
                (quiet JSON output in SI units).

        Returns:
            List of command arguments.
        """
        return [command, *(self.args if args is None else args)]

    def start(
        self,
        command: str = DEFAULT_RTL433_PATH,
        args: Sequence[str] | None = None,
    ) -> ProcessHandle | None:
        """Spawn the decoder and start streaming its output.

        Spawn failures are logged and never retried.

        Args:
            command: Decoder binary.
            args: Decoder arguments.

        Returns:
            ProcessHandle, or None if the process could not be spawned.
        """
        if self.handle is not None and self.handle.is_running():
            logger.warning("rtl_433 already running (PID: %d)", self.handle.pid)
            return self.handle

        if self.kill_stale:
            kill_stale_instances(command)

        cmd = self.build_command(command, args)
        logger.info("Starting rtl_433 server: %s", " ".join(cmd))

        try:
            process = subprocess.Popen(cmd, stdout=subprocess.PIPE)
        except OSError as e:
            logger.error("rtl_433 error: %s", e)
            return None

        logger.info("rtl_433 started (PID: %d)", process.pid)
        self.handle = ProcessHandle(process, cmd, self.on_event, self.chunk_size)
        self.handle.start_reading()
        return self.handle

    def shutdown(self, timeout: float = STOP_TIMEOUT_SECONDS) -> None:
        """Stop the decoder if it is running."""
        if self.handle is None:
            return
        self.handle.stop(timeout)
