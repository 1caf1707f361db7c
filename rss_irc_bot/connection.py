"""IRC connection manager for RSS IRC Bot."""

import asyncio

from .codec import Line, LineParseError, parse_line
from .logging_config import create_execution_logger
from .models import Connect, ConnectionState, Disconnect, Event

DEFAULT_READ_TIMEOUT = 60.0
DEFAULT_RETRY_DELAY = 10.0
DEFAULT_MAX_RETRY_DELAY = 300.0


class ConnectionClosed(Exception):
    """Raised inside the read loop when the peer ended the stream."""


def parse_server_address(server: str) -> tuple[str, int]:
    """Split a host:port address.

    Raises:
        ValueError: If the port is missing or not a number
    """
    host, sep, port = server.rpartition(":")
    if not sep or not host or not port.isdigit():
        raise ValueError(f"Server address must be host:port, got {server!r}")
    return host, int(port)


class ConnectionManager:
    """Keeps one IRC connection alive and exposes it as event queues.

    Inbound events (Connect, Disconnect, Line) are put on ``rx``. Outbound
    lines are queued with ``send`` and written by a writer task that lives
    for exactly one connected period.
    """

    def __init__(
        self,
        server: str,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        backoff_factor: float = 1.0,
        max_retry_delay: float = DEFAULT_MAX_RETRY_DELAY,
        reconnect_on_timeout: bool = False,
        queue_size: int = 1,
        execution_id: str | None = None,
    ):
        """Initialize the connection manager.

        Args:
            server: Server address as host:port
            read_timeout: Seconds a single read may wait for data
            retry_delay: Seconds to wait after the first failed dial
            backoff_factor: Multiplier applied per consecutive failure;
                1.0 keeps the delay fixed
            max_retry_delay: Upper bound on the wait between dials
            reconnect_on_timeout: Treat a read timeout as end of stream
            queue_size: Capacity of the inbound event queue
            execution_id: Execution ID for logging context
        """
        self.server = server
        self.host, self.port = parse_server_address(server)
        self.read_timeout = read_timeout
        self.retry_delay = retry_delay
        self.backoff_factor = backoff_factor
        self.max_retry_delay = max_retry_delay
        self.reconnect_on_timeout = reconnect_on_timeout
        self.rx: asyncio.Queue[Event] = asyncio.Queue(maxsize=queue_size)
        self.tx: asyncio.Queue[Line | None] | None = None
        self.state = ConnectionState.DISCONNECTED
        self.logger = create_execution_logger("connection", execution_id)

    def retry_delay_for(self, attempt: int) -> float:
        """Seconds to wait after the given number of prior failed dials."""
        delay = self.retry_delay * self.backoff_factor**attempt
        return min(delay, self.max_retry_delay)

    def send(self, line: Line) -> bool:
        """Queue a line for the current connection period.

        Returns:
            True if queued, False if there is no active connection
        """
        if self.tx is None:
            self.logger.warning(
                "Not connected, dropping outbound line", command=line.command
            )
            return False
        self.tx.put_nowait(line)
        return True

    async def run(self) -> None:
        """Dial, serve and redial forever."""
        attempt = 0
        while True:
            self._set_state(ConnectionState.CONNECTING)
            self.logger.info("Dialing...", server=self.server)
            try:
                reader, writer = await self._dial()
            except OSError as e:
                delay = self.retry_delay_for(attempt)
                attempt += 1
                self.logger.warning(
                    f"Could not connect. Retrying in {delay:g}s: {e}",
                    server=self.server,
                    attempt=attempt,
                    error=str(e),
                )
                await self._wait(delay)
                continue

            attempt = 0
            self.logger.info("Dialed", server=self.server)
            await self._serve(reader, writer)

    async def _serve(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        tx: asyncio.Queue[Line | None] = asyncio.Queue()
        self.tx = tx
        self._set_state(ConnectionState.CONNECTED)
        writer_task = asyncio.create_task(self._write_loop(writer, tx))

        try:
            await self.rx.put(Connect())
            await self._read_loop(reader)
        finally:
            self.tx = None
            tx.put_nowait(None)
            await writer_task
            writer.close()
            try:
                await writer.wait_closed()
            except OSError as e:
                self.logger.debug(f"Error closing socket: {e}", error=str(e))

        self._set_state(ConnectionState.DISCONNECTED)
        await self.rx.put(Disconnect())

    async def _read_loop(self, reader: asyncio.StreamReader) -> None:
        while True:
            try:
                raw = await self._read_line(reader)
            except ConnectionClosed as e:
                self.logger.info(f"{e}. read loop restarting", server=self.server)
                return
            except asyncio.TimeoutError:
                if self.reconnect_on_timeout:
                    self.logger.warning(
                        "Read timed out, reconnecting", server=self.server
                    )
                    return
                self.logger.warning("Reading error: read timed out", server=self.server)
                continue
            except ValueError as e:
                # Line longer than the stream buffer limit
                self.logger.warning(f"Reading error: {e}", error=str(e))
                continue

            try:
                line = parse_line(raw)
            except LineParseError as e:
                self.logger.warning(f"Line parsing error: {e}", error=str(e))
                continue

            await self.rx.put(line)

    async def _read_line(self, reader: asyncio.StreamReader) -> str:
        # Only the wait_for deadline surfaces as TimeoutError here
        data = await asyncio.wait_for(
            self._readline_or_close(reader), timeout=self.read_timeout
        )
        if not data:
            raise ConnectionClosed("Got EOF")
        return data.decode("utf-8", errors="replace")

    async def _readline_or_close(self, reader: asyncio.StreamReader) -> bytes:
        # A stream error is sticky: every later read raises it again
        try:
            return await reader.readline()
        except OSError as e:
            raise ConnectionClosed(f"Connection lost: {e}") from e

    async def _write_loop(
        self, writer: asyncio.StreamWriter, tx: asyncio.Queue[Line | None]
    ) -> None:
        while True:
            line = await tx.get()
            if line is None:
                break
            try:
                await self._write_line(writer, line)
            except ConnectionError as e:
                self.logger.info(
                    f"Got EOF in write task, write task exiting: {e}", error=str(e)
                )
                return
            except OSError as e:
                self.logger.error(f"Sending error: {e}", error=str(e))
                continue
        self.logger.debug("Write task terminating")

    async def _write_line(self, writer: asyncio.StreamWriter, line: Line) -> None:
        data = line.encode()
        self.logger.debug(
            f"Sending Line: {data.decode('utf-8').rstrip()}", command=line.command
        )
        writer.write(data)
        await writer.drain()

    async def _dial(self) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        return await asyncio.open_connection(self.host, self.port)

    async def _wait(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    def _set_state(self, state: ConnectionState) -> None:
        if state is not self.state:
            self.state = state
            self.logger.log_state_change(state.value, server=self.server)
