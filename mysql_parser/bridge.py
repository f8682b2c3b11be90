"""
Native bridge: NUL-terminated result buffers with explicit release.

A host calls ``parse_sql`` with SQL text and receives the address of a
NUL-terminated UTF-8 buffer holding the encoded Envelope. The buffer stays
alive, owned by this side, until the host passes the address back to
``free_string``. Every address is released exactly once.
"""

import ctypes
import threading
from typing import Callable, Dict, Optional, Tuple, Union

from mysql_parser.core.envelope_builder import EnvelopeBuilder
from mysql_parser.errors import BridgeError
from mysql_parser.models.envelope import Envelope
from mysql_parser.utils.logging import get_logger
from mysql_parser.utils.metrics import emit_metric

logger = get_logger(__name__)

# C signatures: char *parse_sql(const char *sql); void free_string(char *result);
PARSE_SQL_FUNC = ctypes.CFUNCTYPE(ctypes.c_void_p, ctypes.c_char_p)
FREE_STRING_FUNC = ctypes.CFUNCTYPE(None, ctypes.c_void_p)


class ResultBufferRegistry:
    """Owns result buffers until they are released."""

    def __init__(self):
        self._buffers: Dict[int, ctypes.Array] = {}
        self._lock = threading.Lock()

    def allocate(self, text: str) -> int:
        """
        Copy text into a new NUL-terminated buffer.

        Returns:
            Address of the buffer's first byte
        """
        buffer = ctypes.create_string_buffer(text.encode("utf-8"))
        address = ctypes.addressof(buffer)
        with self._lock:
            self._buffers[address] = buffer
        return address

    def read(self, address: int) -> str:
        with self._lock:
            buffer = self._buffers.get(address)
        if buffer is None:
            raise BridgeError(f"unknown result buffer: {address:#x}")
        return buffer.value.decode("utf-8")

    def release(self, address: int) -> None:
        """
        Release a buffer.

        Raises:
            BridgeError: If the address is unknown or was already released
        """
        with self._lock:
            buffer = self._buffers.pop(address, None)
        if buffer is None:
            raise BridgeError(f"unknown or already released result buffer: {address:#x}")

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffers)


class Bridge:
    """Exposes an envelope builder through address-based entry points."""

    def __init__(
        self,
        builder: Optional[EnvelopeBuilder] = None,
        registry: Optional[ResultBufferRegistry] = None,
    ):
        """
        Initialize the bridge.

        Args:
            builder: Envelope builder to use; the default dialect's if omitted
            registry: Buffer registry; a private one is created if omitted
        """
        if builder is None:
            from mysql_parser.service import get_envelope_builder

            builder = get_envelope_builder()
        self.builder = builder
        self.registry = registry or ResultBufferRegistry()
        self._c_callbacks: Optional[Tuple[Callable, Callable]] = None

    def parse_sql(self, sql: Union[str, bytes, None]) -> int:
        """
        Parse SQL text and return the address of its encoded Envelope.

        Bytes are decoded as UTF-8; undecodable input gives a failure
        Envelope rather than an exception. The caller must pass the
        returned address to ``free_string`` exactly once.

        Args:
            sql: SQL text; ``None`` is treated as empty input

        Returns:
            Address of a NUL-terminated UTF-8 buffer
        """
        if sql is None:
            sql = ""
        if isinstance(sql, bytes):
            try:
                sql = sql.decode("utf-8")
            except UnicodeDecodeError as e:
                logger.info(f"Rejected non UTF-8 input: {e}")
                envelope = Envelope.failure(f"input is not valid UTF-8: {e.reason} at byte {e.start}")
                return self.registry.allocate(envelope.to_json())

        envelope = self.builder.build(sql)
        address = self.registry.allocate(envelope.to_json())
        emit_metric("bridge.outstanding", len(self.registry))
        return address

    def read_string(self, address: int) -> str:
        """Return the text held by an outstanding result buffer."""
        return self.registry.read(address)

    def free_string(self, address: int) -> None:
        """
        Release a result buffer returned by ``parse_sql``.

        Raises:
            BridgeError: On an unknown address or a second release
        """
        self.registry.release(address)

    @property
    def outstanding(self) -> int:
        """Number of result buffers not yet released."""
        return len(self.registry)

    def c_entry_points(self) -> Tuple[Callable, Callable]:
        """
        Return C-callable ``parse_sql`` and ``free_string`` function pointers.

        The callbacks are cached on the bridge; they stay valid as long as
        the bridge is alive.
        """
        if self._c_callbacks is None:
            def _free(address):
                try:
                    self.free_string(address)
                except BridgeError as e:
                    logger.error(f"Invalid release from native caller: {e}")

            self._c_callbacks = (
                PARSE_SQL_FUNC(self.parse_sql),
                FREE_STRING_FUNC(_free),
            )
        return self._c_callbacks


_bridge: Optional[Bridge] = None
_bridge_lock = threading.Lock()


def get_bridge() -> Bridge:
    """Return the process-wide bridge for the default dialect."""
    global _bridge
    with _bridge_lock:
        if _bridge is None:
            _bridge = Bridge()
    return _bridge


def parse_sql(sql: Union[str, bytes, None]) -> int:
    """Parse SQL text through the process-wide bridge."""
    return get_bridge().parse_sql(sql)


def free_string(address: int) -> None:
    """Release a buffer returned by ``parse_sql``."""
    get_bridge().free_string(address)
