"""Supervised execution of a program against a single input."""

import asyncio
import logging
import os
import signal
import time
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from verdict_engine.models.outcome import ExitStatus, RunOutcome

log = logging.getLogger(__name__)

READ_CHUNK_SIZE = 64 * 1024
STREAM_LIMIT = 64 * 1024


class LaunchError(Exception):
    """Raised when the executable cannot be started."""

    def __init__(self, executable: Path, reason: str) -> None:
        super().__init__(f"Failed to launch {executable}: {reason}")
        self.executable = executable
        self.reason = reason


class _ExitWatchingProtocol(asyncio.subprocess.SubprocessStreamProtocol):
    """Stream protocol that resolves `exited` as soon as the leader is reaped.

    `Process.wait` only returns once every pipe is closed, which a
    background descendant can delay indefinitely.
    """

    def __init__(self, limit: int, loop: asyncio.AbstractEventLoop) -> None:
        super().__init__(limit=limit, loop=loop)
        self.exited: asyncio.Future[None] = loop.create_future()

    def process_exited(self) -> None:
        super().process_exited()
        if not self.exited.done():
            self.exited.set_result(None)


@dataclass(frozen=True, kw_only=True)
class ProcessRunner:
    """Runs a program once under a wall-clock time limit.

    stdin is fed, stdout and stderr are drained, and the exit is awaited
    concurrently so a program writing before it has consumed its input can
    never deadlock on a full pipe.
    """

    drain_timeout: float = 1.0
    kill_timeout: float = 1.0

    async def run(
        self,
        executable: Path,
        stdin: str,
        time_limit: float,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> RunOutcome:
        """Run the executable and report how it terminated.

        Args:
            executable: Path to the program (started without a shell)
            stdin: Text written to the program's standard input
            time_limit: Wall-clock budget in seconds
            cancel_event: When set, the run is killed and reported as killed

        Returns:
            Captured output, exit status and elapsed wall-clock time

        Raises:
            LaunchError: If the program cannot be started

        """
        if time_limit <= 0:
            raise ValueError(f"time_limit must be positive, got {time_limit}")

        loop = asyncio.get_running_loop()
        started = time.monotonic()
        try:
            transport, protocol = await loop.subprocess_exec(
                lambda: _ExitWatchingProtocol(limit=STREAM_LIMIT, loop=loop),
                str(executable),
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=os.name == "posix",
            )
        except OSError as e:
            raise LaunchError(Path(executable), e.strerror or str(e)) from e

        process = asyncio.subprocess.Process(transport, protocol, loop)

        log.debug("Started pid=%d executable=%s", process.pid, executable)

        assert process.stdin is not None
        assert process.stdout is not None
        assert process.stderr is not None

        stdout = bytearray()
        stderr = bytearray()
        io_tasks = [
            asyncio.create_task(_feed(process.stdin, _terminate_input(stdin))),
            asyncio.create_task(_drain(process.stdout, stdout)),
            asyncio.create_task(_drain(process.stderr, stderr)),
        ]

        try:
            exit_status = await self._wait(
                process, protocol.exited, time_limit, cancel_event
            )
            elapsed = time.monotonic() - started
            if exit_status.kind != "exited":
                await self._kill(process, protocol.exited)
        except asyncio.CancelledError:
            await self._kill(process, protocol.exited)
            raise
        finally:
            await self._collect_io(process, io_tasks)

        log.debug(
            "Run finished pid=%d status=%s elapsed=%.3fs",
            process.pid,
            exit_status.kind,
            elapsed,
        )

        return RunOutcome(
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
            exit_status=exit_status,
            wall_clock_millis=max(0, round(elapsed * 1000)),
        )

    async def _wait(
        self,
        process: asyncio.subprocess.Process,
        exited: asyncio.Future[None],
        time_limit: float,
        cancel_event: asyncio.Event | None,
    ) -> ExitStatus:
        """Race the leader's exit against the time limit and the cancel signal.

        A leader that was already reaped when the timer or the cancel signal
        fired is reported with its own exit status.
        """
        waiters: set[asyncio.Future[Any]] = {exited}
        cancel_waiter: asyncio.Task[Any] | None = None
        if cancel_event is not None:
            cancel_waiter = asyncio.create_task(cancel_event.wait())
            waiters.add(cancel_waiter)

        try:
            done, _ = await asyncio.wait(
                waiters, timeout=time_limit, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            if cancel_waiter is not None and not cancel_waiter.done():
                cancel_waiter.cancel()

        if process.returncode is not None:
            return _exit_status(process.returncode)

        if cancel_waiter is not None and cancel_waiter in done:
            log.info("Run cancelled, killing pid=%d", process.pid)
            return ExitStatus.killed()

        log.info("Run exceeded %.3fs, killing pid=%d", time_limit, process.pid)
        return ExitStatus.timed_out()

    async def _kill(
        self, process: asyncio.subprocess.Process, exited: asyncio.Future[None]
    ) -> None:
        """Kill the process group and wait for the leader to be reaped."""
        _kill_group(process)
        try:
            await asyncio.wait_for(asyncio.shield(exited), timeout=self.kill_timeout)
        except TimeoutError:
            log.warning("Process pid=%d did not exit after kill", process.pid)

    async def _collect_io(
        self,
        process: asyncio.subprocess.Process,
        io_tasks: Sequence[asyncio.Task[None]],
    ) -> None:
        """Let the streams reach EOF, then clean up leftover descendants."""
        _, pending = await asyncio.wait(io_tasks, timeout=self.drain_timeout)

        # Descendants may still hold the pipes open after the leader exited.
        _kill_group(process)

        for task in pending:
            task.cancel()
        results = await asyncio.gather(*io_tasks, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                log.warning(
                    "Stream handling failed for pid=%d: %s", process.pid, result
                )


def _terminate_input(text: str) -> bytes:
    """Encode stdin text, making sure the last line is newline-terminated."""
    if not text.endswith("\n"):
        text += "\n"
    return text.encode("utf-8")


async def _feed(stream: asyncio.StreamWriter, data: bytes) -> None:
    """Write all input and close the write side so the program sees EOF."""
    try:
        stream.write(data)
        await stream.drain()
    except (BrokenPipeError, ConnectionResetError):
        log.debug("Program closed stdin before consuming all input")
    finally:
        stream.close()


async def _drain(stream: asyncio.StreamReader, buffer: bytearray) -> None:
    """Append chunks to the buffer as they arrive, until EOF."""
    while chunk := await stream.read(READ_CHUNK_SIZE):
        buffer.extend(chunk)


def _exit_status(returncode: int) -> ExitStatus:
    """Map a return code to an exit status; negative codes mean a signal."""
    if returncode < 0:
        return ExitStatus.killed(signal=-returncode)
    return ExitStatus.exited(returncode)


def _kill_group(process: asyncio.subprocess.Process) -> None:
    """Best-effort SIGKILL of the process and everything in its session."""
    try:
        if os.name == "posix":
            os.killpg(process.pid, signal.SIGKILL)
        elif process.returncode is None:
            process.kill()
    except (ProcessLookupError, PermissionError):
        pass
