"""Audio sinks that write raw sample bytes to a file, stdout or a subprocess."""

from __future__ import annotations

import abc
import logging
import os
import shlex
import subprocess
import sys
from typing import BinaryIO, Callable, ClassVar, Optional

from canzone.playback.config import AudioFormat

log = logging.getLogger(__name__)


class SinkError(Exception):
    """Base class for audio sink failures."""

    prefix: ClassVar[str] = "Audio Sink Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.prefix}: {self.message}"


class SinkNotConnected(SinkError):
    """The sink has no open output."""

    prefix = "Audio Sink Error Not Connected"


class SinkConnectionRefused(SinkError):
    """The sink's output could not be opened."""

    prefix = "Audio Sink Error Connection Refused"


class SinkWriteError(SinkError):
    """Writing, flushing or closing the output failed."""

    prefix = "Audio Sink Error On Write"


class SinkInvalidParams(SinkError):
    """The sink was configured with unusable parameters."""

    prefix = "Audio Sink Error Invalid Parameters"


class SinkStateChange(SinkError):
    """The sink could not change state."""

    prefix = "Audio Sink Error Changing State"


class Sink(abc.ABC):
    """An audio output that accepts encoded sample bytes.

    Used as a context manager it is started on entry and stopped on exit.
    """

    NAME: ClassVar[str] = ""

    def start(self) -> None:
        """Open the output; the default does nothing."""

    def stop(self) -> None:
        """Flush and release the output; the default does nothing."""

    @abc.abstractmethod
    def write(self, data: bytes) -> None:
        """Write sample bytes to the output."""

    def __enter__(self) -> "Sink":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


_PIPE_USAGE = (
    "\nUsage:\n\nOutput to stdout:\n\n\t--backend pipe\n\n"
    "Output to file:\n\n\t--backend pipe --device {filename}\n"
)


class StdoutSink(Sink):
    """Writes samples to a file, or to standard output when no file is given."""

    NAME = "pipe"

    def __init__(self, file: Optional[str] = None, audio_format: AudioFormat = AudioFormat.S16) -> None:
        if file == "?":
            print(_PIPE_USAGE)
            raise SystemExit(0)
        log.info("Using StdoutSink (pipe) with format: %s", audio_format.name)
        self.file = file
        self.audio_format = audio_format
        self._output: Optional[BinaryIO] = None
        self._owns_output = False

    def start(self) -> None:
        if self._output is not None:
            return
        if self.file is None:
            self._output = sys.stdout.buffer
            self._owns_output = False
            return
        try:
            fd = os.open(self.file, os.O_WRONLY | os.O_CREAT, 0o666)
        except OSError as exc:
            raise SinkConnectionRefused(
                f"<StdoutSink> File Path {self.file} Can Not be Opened and/or Created, {exc}"
            ) from exc
        self._output = os.fdopen(fd, "wb")
        self._owns_output = True

    def stop(self) -> None:
        output, self._output = self._output, None
        if output is None:
            raise SinkNotConnected("<StdoutSink> The Output Stream is None")
        try:
            output.flush()
            if self._owns_output:
                output.close()
        except OSError as exc:
            raise SinkWriteError(
                f"<StdoutSink> Failed to Flush the Output Stream, {exc}"
            ) from exc

    def write(self, data: bytes) -> None:
        if self._output is None:
            raise SinkNotConnected("<StdoutSink> The Output Stream is None")
        try:
            self._output.write(data)
        except OSError as exc:
            raise SinkWriteError(f"<StdoutSink> {exc}") from exc


_SUBPROCESS_USAGE = (
    "\nUsage:\n\nOutput to a Subprocess:\n\n\t--backend subprocess --device {shell_command}\n"
)


class SubprocessSink(Sink):
    """Pipes samples into the standard input of a command."""

    NAME = "subprocess"

    def __init__(
        self, shell_command: Optional[str] = None, audio_format: AudioFormat = AudioFormat.S16
    ) -> None:
        if shell_command == "?":
            print(_SUBPROCESS_USAGE)
            raise SystemExit(0)
        log.info("Using SubprocessSink with format: %s", audio_format.name)
        self.shell_command = shell_command
        self.audio_format = audio_format
        self._child: Optional[subprocess.Popen] = None

    def start(self) -> None:
        if self._child is not None:
            return
        command = self.shell_command
        if command is None:
            raise SinkInvalidParams("<SubprocessSink> Missing Required Shell Command")
        try:
            args = shlex.split(command)
        except ValueError as exc:
            raise SinkInvalidParams(
                f"<SubprocessSink> Failed to Parse Command args for {command}, {exc}"
            ) from exc
        if not args:
            raise SinkInvalidParams("<SubprocessSink> Missing Required Shell Command")
        try:
            self._child = subprocess.Popen(args, stdin=subprocess.PIPE, bufsize=0)
        except OSError as exc:
            raise SinkConnectionRefused(
                f"<SubprocessSink> Command {command} Can Not be Executed, {exc}"
            ) from exc

    def stop(self) -> None:
        child, self._child = self._child, None
        if child is None:
            raise SinkNotConnected("<SubprocessSink> The Subprocess is None")

        if child.poll() is not None:
            # Already exited; nothing left to do but release the pipe.
            if child.stdin is not None:
                try:
                    child.stdin.close()
                except OSError:
                    pass
            return

        if child.stdin is None:
            raise SinkNotConnected("<SubprocessSink> The Subprocess's stdin is None")
        try:
            child.stdin.flush()
            child.stdin.close()
        except OSError as exc:
            raise SinkWriteError(f"<SubprocessSink> Failed to Flush the Subprocess, {exc}") from exc
        try:
            child.kill()
        except OSError as exc:
            raise SinkWriteError(f"<SubprocessSink> Failed to Kill the Subprocess, {exc}") from exc
        try:
            child.wait()
        except OSError as exc:
            raise SinkWriteError(
                f"<SubprocessSink> Failed to Wait for the Subprocess to Exit, {exc}"
            ) from exc

    def write(self, data: bytes) -> None:
        view = memoryview(data).cast("B")
        restarted = False
        offset = 0
        while offset < len(view):
            stdin = self._stdin()
            try:
                written = stdin.write(view[offset:])
            except InterruptedError:
                continue
            except OSError as exc:
                restarted = self._try_restart(SinkWriteError(f"<SubprocessSink> {exc}"), restarted)
                continue
            if not written:
                restarted = self._try_restart(
                    SinkWriteError(
                        "<SubprocessSink> The Subprocess is no longer able to accept Bytes"
                    ),
                    restarted,
                )
                continue
            offset += written

    def _stdin(self) -> BinaryIO:
        if self._child is None:
            raise SinkNotConnected("<SubprocessSink> The Subprocess is None")
        if self._child.stdin is None:
            raise SinkNotConnected("<SubprocessSink> The Subprocess's stdin is None")
        return self._child.stdin

    def _try_restart(self, error: SinkError, restarted: bool) -> bool:
        """Restart the child once per write; otherwise raise ``error``."""
        if restarted:
            raise error
        try:
            self.stop()
            self.start()
        except SinkError:
            raise error from None
        return True


SinkBuilder = Callable[[Optional[str], AudioFormat], Sink]

BACKENDS: tuple[tuple[str, SinkBuilder], ...] = (
    (StdoutSink.NAME, StdoutSink),
    (SubprocessSink.NAME, SubprocessSink),
)


def find(name: Optional[str] = None) -> Optional[SinkBuilder]:
    """Return the sink builder called ``name``, or the default one for ``None``."""
    if name is None:
        return BACKENDS[0][1] if BACKENDS else None
    return next((builder for backend, builder in BACKENDS if backend == name), None)