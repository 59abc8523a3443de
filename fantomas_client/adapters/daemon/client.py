"""Daemon client adapter for Fantomas formatting requests.

Owns one spawned `fantomas --daemon` process and the JSON-RPC channel over
its stdin/stdout. Requests are correlated by id and answered through
concurrent.futures.Future objects resolved by a reader thread.
"""

import contextlib
import logging
import subprocess
import threading
from collections import deque
from concurrent.futures import Future, InvalidStateError
from typing import Any, NoReturn

from fantomas_client.adapters.daemon.launch import build_daemon_command
from fantomas_client.adapters.daemon.protocol import (
    METHOD_PREFIX,
    ProtocolError,
    Request,
    Response,
    is_response,
    read_message,
)
from fantomas_client.adapters.daemon.timeouts import DaemonTimeouts
from fantomas_client.domain.exceptions import (
    DaemonLaunchError,
    DaemonRequestError,
    DaemonTransportError,
)
from fantomas_client.domain.messages import FormatDocumentRequest, FormatSelectionRequest
from fantomas_client.domain.tooling import StartMethod

logger = logging.getLogger(__name__)

# Number of stderr lines kept for launch-failure diagnostics
STDERR_TAIL_LINES = 50


def _settle(future: Future, result: Any = None, error: BaseException | None = None) -> None:
    """Resolve a future unless the caller already cancelled it."""
    with contextlib.suppress(InvalidStateError):
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(result)


class DaemonProcess:
    """A running Fantomas daemon and its message channel.

    Implements the FormattingDaemon protocol. Create instances with
    launch(), which performs the version handshake. A DaemonProcess is
    never restarted: once its channel fails every request fails with
    DaemonTransportError and the owner must replace it.
    """

    def __init__(
        self,
        process: subprocess.Popen,
        start_method: StartMethod,
        shutdown_timeout: float = DaemonTimeouts.TERMINATE_WAIT,
    ):
        """Wrap an already spawned process and start the reader threads.

        Args:
            process: Process with stdin, stdout and stderr pipes
            start_method: Start method that produced the process
            shutdown_timeout: Seconds to wait for exit after terminate()
        """
        self._process = process
        self._start_method = start_method
        self._shutdown_timeout = shutdown_timeout

        self._lock = threading.Lock()
        self._write_lock = threading.Lock()
        self._pending: dict[int, Future] = {}
        self._next_id = 0
        self._failure: str | None = None
        self._closed = False
        self._stderr_tail: deque[str] = deque(maxlen=STDERR_TAIL_LINES)

        self._reader = threading.Thread(
            target=self._read_loop, name=f"fantomas-daemon-{process.pid}-out", daemon=True
        )
        self._stderr_reader = threading.Thread(
            target=self._drain_stderr, name=f"fantomas-daemon-{process.pid}-err", daemon=True
        )
        self._reader.start()
        self._stderr_reader.start()

    @classmethod
    def launch(
        cls,
        start_method: StartMethod,
        dotnet: str = "dotnet",
        startup_timeout: float = DaemonTimeouts.HANDSHAKE,
        shutdown_timeout: float = DaemonTimeouts.TERMINATE_WAIT,
    ) -> "DaemonProcess":
        """Spawn a daemon and confirm it answers a version request.

        Args:
            start_method: How to start the tool
            dotnet: dotnet CLI used for local tools
            startup_timeout: Seconds to wait for the version handshake
            shutdown_timeout: Seconds to wait for exit on close

        Returns:
            A responsive DaemonProcess

        Raises:
            DaemonLaunchError: If the process cannot be spawned or does not
                answer the handshake. The process is killed before raising.
        """
        args, cwd = build_daemon_command(start_method, dotnet=dotnet)
        command = " ".join(args)
        logger.info(f"Starting Fantomas daemon: {command}" + (f" (cwd {cwd})" if cwd else ""))

        try:
            process = subprocess.Popen(
                args,
                cwd=cwd,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            raise DaemonLaunchError(f"Failed to run '{command}': {e}") from e

        daemon = cls(process, start_method, shutdown_timeout=shutdown_timeout)
        try:
            version = daemon.version().result(timeout=startup_timeout)
        except TimeoutError:
            reason = f"'{command}' did not answer the version request within {startup_timeout}s"
            daemon._abort_launch(reason)
        except (DaemonTransportError, DaemonRequestError) as e:
            daemon._abort_launch(f"'{command}' failed its version request: {e.message}")

        logger.info(f"Fantomas daemon {version} running (PID {process.pid})")
        return daemon

    def _abort_launch(self, reason: str) -> NoReturn:
        """Kill a daemon that failed its handshake and raise the launch error."""
        self.close()
        stderr = self.stderr_output()
        if stderr:
            reason += f"\nStderr: {stderr}"
        raise DaemonLaunchError(reason)

    # ------------------------------------------------------------------
    # FormattingDaemon protocol
    # ------------------------------------------------------------------

    @property
    def start_method(self) -> StartMethod:
        return self._start_method

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def is_alive(self) -> bool:
        """True while the process runs and the channel has not failed."""
        with self._lock:
            failed = self._failure is not None
        return not failed and self._process.poll() is None

    def version(self) -> "Future[str]":
        return self._send("version")

    def format_document(self, request: FormatDocumentRequest) -> "Future[Any]":
        return self._send("formatDocument", request.to_params())

    def format_selection(self, request: FormatSelectionRequest) -> "Future[Any]":
        return self._send("formatSelection", request.to_params())

    def configuration(self) -> "Future[str]":
        return self._send("configuration")

    def close(self) -> None:
        """Fail pending requests, close the channel and stop the process.

        Safe to call more than once and on a daemon that already died.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True

        self._fail_pending("Fantomas daemon was shut down")

        with contextlib.suppress(OSError, ValueError):
            self._process.stdin.close()

        if self._process.poll() is None:
            logger.info(f"Stopping Fantomas daemon (PID {self._process.pid})...")
            self._process.terminate()
            try:
                self._process.wait(timeout=self._shutdown_timeout)
            except subprocess.TimeoutExpired:
                logger.warning("Fantomas daemon did not stop gracefully, killing...")
                self._process.kill()
                with contextlib.suppress(subprocess.TimeoutExpired):
                    self._process.wait(timeout=DaemonTimeouts.KILL_WAIT)

        for thread in (self._reader, self._stderr_reader):
            if thread is not threading.current_thread():
                thread.join(timeout=DaemonTimeouts.READER_JOIN)

        for stream in (self._process.stdout, self._process.stderr):
            with contextlib.suppress(OSError, ValueError):
                stream.close()

    def stderr_output(self) -> str:
        """Most recent stderr lines of the daemon, for diagnostics."""
        return "\n".join(self._stderr_tail)

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _send(self, name: str, params: dict[str, Any] | None = None) -> Future:
        """Send one request and return the future for its result."""
        future: Future = Future()
        with self._lock:
            failure = self._failure
            if failure is None:
                self._next_id += 1
                request_id = self._next_id
                self._pending[request_id] = future

        if failure is not None:
            future.set_exception(DaemonTransportError(failure))
            return future

        # Cancelled futures (caller timeouts) no longer need an answer
        future.add_done_callback(
            lambda f, rid=request_id: self._forget(rid) if f.cancelled() else None
        )

        data = Request(METHOD_PREFIX + name, params, request_id).encode()
        try:
            with self._write_lock:
                self._process.stdin.write(data)
                self._process.stdin.flush()
        except (OSError, ValueError) as e:
            # ValueError: stdin already closed
            self._fail_pending(f"Failed to write to Fantomas daemon: {e}")
        return future

    def _forget(self, request_id: int) -> None:
        with self._lock:
            self._pending.pop(request_id, None)

    def _fail_pending(self, reason: str) -> None:
        """Mark the channel failed and reject every outstanding request."""
        with self._lock:
            if self._failure is None:
                self._failure = reason
            pending = list(self._pending.values())
            self._pending.clear()

        for future in pending:
            _settle(future, error=DaemonTransportError(reason))

    def _read_loop(self) -> None:
        """Dispatch responses from stdout until the channel ends."""
        stdout = self._process.stdout
        while True:
            try:
                message = read_message(stdout)
            except ProtocolError as e:
                reason = f"Invalid message from Fantomas daemon: {e}"
                break
            except (OSError, ValueError) as e:
                reason = f"Failed to read from Fantomas daemon: {e}"
                break

            if message is None:
                reason = "Fantomas daemon closed its output stream"
                break

            if not is_response(message):
                logger.debug(f"Ignoring daemon-initiated message: {message.get('method')}")
                continue

            try:
                response = Response.from_dict(message)
            except ProtocolError as e:
                logger.warning(f"Discarding unmatched daemon response: {e}")
                continue

            with self._lock:
                future = self._pending.pop(response.id, None)
            if future is None:
                logger.debug(f"No pending request for response id {response.id}")
                continue

            if response.is_error():
                code = response.error.get("code")
                _settle(
                    future,
                    error=DaemonRequestError(
                        response.error_message, code if isinstance(code, int) else None
                    ),
                )
            else:
                _settle(future, result=response.result)

        if not self._closed:
            logger.warning(f"Fantomas daemon (PID {self._process.pid}) channel closed: {reason}")
        self._fail_pending(reason)

    def _drain_stderr(self) -> None:
        """Keep the stderr pipe empty so the daemon never blocks on it."""
        try:
            for raw in self._process.stderr:
                line = raw.decode("utf-8", errors="replace").rstrip()
                if line:
                    self._stderr_tail.append(line)
                    logger.debug(f"fantomas[{self._process.pid}]: {line}")
        except (OSError, ValueError):
            # Pipe closed during shutdown
            pass
