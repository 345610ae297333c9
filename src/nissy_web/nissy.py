"""Invocation of the nissy executable and post-processing of its output."""

from __future__ import annotations

import asyncio
import logging
import os
import re
import signal
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from .errors import ProcessError, ProcessTimeoutError
from .models import Step

logger = logging.getLogger(__name__)

WARNING_START = "--- Warning ---"
WARNING_END = "-" * 15
NO_SOLUTION = "No solution found"

_STEP_LINE = re.compile(r"^(\S+)\s+(.+)$")
_READ_CHUNK = 64 * 1024


@dataclass(frozen=True)
class ProcessResult:
    """Captured outcome of one solver run."""

    stdout: str = ""
    stderr: str = ""
    returncode: int | None = None
    timed_out: bool = False
    error: str | None = None  # set when the executable could not be started

    @property
    def failed(self) -> bool:
        return self.timed_out or self.error is not None or bool(self.returncode)


def filter_warnings(text: str) -> str:
    """Drop ``--- Warning ---`` blocks from solver output and trim the rest.

    A block runs from a line equal to the start marker through the next line
    of fifteen hyphens. A block that is never closed swallows the remainder.
    """
    kept: list[str] = []
    in_warning = False
    for line in text.replace("\r\n", "\n").split("\n"):
        if in_warning:
            if line == WARNING_END:
                in_warning = False
            continue
        if line == WARNING_START:
            in_warning = True
            continue
        kept.append(line)
    return "\n".join(kept).strip()


def resolve_output(result: ProcessResult) -> str:
    """Turn a process result into output text or a gateway error.

    nissy may exit non-zero (for instance over missing optional tables) and
    still print a valid answer, so usable stdout always wins over the exit
    status.
    """
    output = filter_warnings(result.stdout)
    if output:
        return output
    if result.timed_out:
        raise ProcessTimeoutError()
    if result.failed:
        message = filter_warnings(result.stderr or result.error or "")
        raise ProcessError(message or NO_SOLUTION)
    return ""


def parse_steps(output: str, skip: Iterable[str] = ()) -> list[Step]:
    """Parse ``<id> <description>`` lines, leaving out ids listed in ``skip``."""
    skipped = set(skip)
    steps: list[Step] = []
    for line in output.split("\n"):
        match = _STEP_LINE.match(line)
        if match is None or match.group(1) in skipped:
            continue
        steps.append(Step(id=match.group(1), description=match.group(2).strip()))
    return steps


async def _drain(stream: asyncio.StreamReader, sink: bytearray) -> None:
    while chunk := await stream.read(_READ_CHUNK):
        sink.extend(chunk)


def _kill_process_group(process: asyncio.subprocess.Process) -> None:
    # The child leads its own session, so its pid is also its process group id.
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


class NissyRunner:
    """Runs the nissy executable with a hard timeout, one process per call."""

    def __init__(self, executable: Path | str, timeout: float):
        # Relative paths name a file under the working directory, never a PATH lookup.
        self.executable = str(Path(executable).resolve())
        self.timeout = timeout

    async def execute(self, args: Sequence[str]) -> ProcessResult:
        """Run ``executable *args`` without a shell and capture both streams.

        On timeout the whole process group is killed; output captured up to
        that point is kept in the result.
        """
        command = args[0] if args else ""
        logger.debug("Running %s %s", self.executable, " ".join(args))
        try:
            process = await asyncio.create_subprocess_exec(
                self.executable,
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except OSError as exc:
            logger.warning("Could not start %s: %s", self.executable, exc)
            return ProcessResult(error=str(exc))

        stdout = bytearray()
        stderr = bytearray()
        timed_out = False
        try:
            await asyncio.wait_for(
                asyncio.gather(
                    _drain(process.stdout, stdout),
                    _drain(process.stderr, stderr),
                    process.wait(),
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            timed_out = True
            logger.warning("%s %s timed out after %ss", self.executable, command, self.timeout)
            _kill_process_group(process)
            await process.wait()
        except asyncio.CancelledError:
            _kill_process_group(process)
            raise

        if process.returncode and not timed_out:
            logger.info("%s %s exited with status %s", self.executable, command, process.returncode)

        return ProcessResult(
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
            returncode=process.returncode,
            timed_out=timed_out,
        )

    async def run(self, args: Sequence[str]) -> str:
        """Run the solver and return its filtered output."""
        return resolve_output(await self.execute(args))
