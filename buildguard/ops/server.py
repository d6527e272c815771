"""Lifecycle of the static file server used by the runtime smoke test."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import signal
from typing import AsyncIterator, List, Optional, Sequence

from buildguard.errors import ServerLaunchError
from buildguard.settings import Settings

logger = logging.getLogger(__name__)

TERMINATE_GRACE_SEC = 5.0


class ServerProcess:
    """A spawned server whose stdout and stderr are drained into memory."""

    def __init__(self, process: asyncio.subprocess.Process, command: Sequence[str]) -> None:
        self._process = process
        self.command = list(command)
        self._stdout: List[str] = []
        self._stderr: List[str] = []
        self._drains = [
            asyncio.create_task(self._drain(process.stdout, self._stdout)),
            asyncio.create_task(self._drain(process.stderr, self._stderr)),
        ]

    @classmethod
    async def start(cls, command: Sequence[str], *, cwd: os.PathLike) -> "ServerProcess":
        logger.info("Starting static server: %s", " ".join(command))
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                cwd=cwd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=os.name == "posix",
            )
        except OSError as exc:
            raise ServerLaunchError(f"Unable to start {command[0]}: {exc}") from exc
        return cls(process, command)

    async def wait(self) -> int:
        """Wait for the server to exit on its own."""

        return await self._process.wait()

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def returncode(self) -> Optional[int]:
        return self._process.returncode

    @property
    def output(self) -> str:
        return "".join(self._stdout)

    @property
    def error_output(self) -> str:
        return "".join(self._stderr)

    @staticmethod
    async def _drain(stream: Optional[asyncio.StreamReader], buffer: List[str]) -> None:
        if stream is None:
            return
        while True:
            chunk = await stream.read(4096)
            if not chunk:
                return
            buffer.append(chunk.decode("utf-8", errors="replace"))

    def _signal(self, sig: int) -> None:
        try:
            if os.name == "posix":
                # The group can outlive its leader, e.g. node forked by npx.
                os.killpg(self._process.pid, sig)
            elif self._process.returncode is not None:
                return
            elif sig == signal.SIGTERM:
                self._process.terminate()
            else:
                self._process.kill()
        except ProcessLookupError:
            logger.debug("Server process %s already exited", self._process.pid)

    async def terminate(self, grace: float = TERMINATE_GRACE_SEC) -> None:
        """Stop the server process group and wait for the pipes to close."""

        self._signal(signal.SIGTERM)
        try:
            await asyncio.wait_for(self._process.wait(), timeout=grace)
        except asyncio.TimeoutError:
            logger.warning({"event": "server_kill", "pid": self._process.pid, "grace": grace})
            self._signal(getattr(signal, "SIGKILL", signal.SIGTERM))
            await self._process.wait()

        # Grandchildren that escaped the group can hold the pipes open.
        _, pending = await asyncio.wait(self._drains, timeout=grace)
        for task in pending:
            task.cancel()
        logger.info(
            {"event": "server_stopped", "pid": self._process.pid, "returncode": self.returncode}
        )


@contextlib.asynccontextmanager
async def serve_build(settings: Settings) -> AsyncIterator[ServerProcess]:
    """Serve ``settings.build_dir`` for the duration of the ``async with`` block.

    The server is terminated on every exit path.
    """

    server = await ServerProcess.start(settings.server_command(), cwd=settings.project_root)
    try:
        yield server
    finally:
        await server.terminate()
