"""Unit tests for the native bridge."""

import ctypes
import json
import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from mysql_parser import bridge as bridge_module
from mysql_parser.bridge import Bridge, ResultBufferRegistry
from mysql_parser.core.envelope_builder import EnvelopeBuilder
from mysql_parser.errors import BridgeError
from mysql_parser.plugins.mysql import MySQLPlugin


@pytest.fixture(scope="module")
def builder():
    return EnvelopeBuilder(MySQLPlugin())


@pytest.fixture
def bridge(builder):
    return Bridge(builder)


class TestResultBufferRegistry:
    """Test cases for ResultBufferRegistry."""

    def test_allocate_and_read(self):
        registry = ResultBufferRegistry()
        address = registry.allocate("héllo")

        assert registry.read(address) == "héllo"
        assert ctypes.string_at(address) == "héllo".encode("utf-8")
        assert len(registry) == 1

    def test_release(self):
        registry = ResultBufferRegistry()
        address = registry.allocate("x")

        registry.release(address)

        assert len(registry) == 0
        with pytest.raises(BridgeError):
            registry.read(address)

    def test_double_release(self):
        registry = ResultBufferRegistry()
        address = registry.allocate("x")
        registry.release(address)

        with pytest.raises(BridgeError, match="already released"):
            registry.release(address)

    def test_release_unknown_address(self):
        with pytest.raises(BridgeError):
            ResultBufferRegistry().release(12345)

    def test_distinct_addresses(self):
        registry = ResultBufferRegistry()

        assert registry.allocate("a") != registry.allocate("a")


class TestBridge:
    """Test cases for Bridge."""

    def test_parse_and_free(self, bridge):
        """Test a result buffer lives until it is freed."""
        address = bridge.parse_sql("SELECT 1")

        assert bridge.outstanding == 1
        payload = json.loads(bridge.read_string(address))
        assert payload["success"] is True
        assert payload["ast"][0]["text"] == "SELECT 1"

        bridge.free_string(address)
        assert bridge.outstanding == 0

    def test_buffer_is_nul_terminated_utf8(self, bridge):
        """Test the raw buffer holds the encoded envelope."""
        address = bridge.parse_sql("SELECT 'ünïcode'")

        raw = ctypes.string_at(address)
        assert raw.decode("utf-8") == bridge.read_string(address)
        assert "ünïcode" in json.loads(raw)["ast"][0]["text"]

        bridge.free_string(address)

    def test_double_free(self, bridge):
        """Test a second release is refused."""
        address = bridge.parse_sql("SELECT 1")
        bridge.free_string(address)

        with pytest.raises(BridgeError):
            bridge.free_string(address)

    def test_syntax_error_envelope(self, bridge):
        """Test invalid SQL still produces a buffer."""
        address = bridge.parse_sql("SELEKT 1")
        payload = json.loads(bridge.read_string(address))
        bridge.free_string(address)

        assert payload["success"] is False
        assert "syntax error" in payload["error"]

    def test_bytes_input(self, bridge):
        address = bridge.parse_sql(b"SELECT 2")
        payload = json.loads(bridge.read_string(address))
        bridge.free_string(address)

        assert payload["ast"][0]["text"] == "SELECT 2"

    def test_invalid_utf8_input(self, bridge):
        """Test undecodable bytes give a failure envelope."""
        address = bridge.parse_sql(b"SELECT '\xff'")
        payload = json.loads(bridge.read_string(address))
        bridge.free_string(address)

        assert payload["success"] is False
        assert "UTF-8" in payload["error"]

    def test_none_input(self, bridge):
        """Test a missing input is treated as empty text."""
        address = bridge.parse_sql(None)
        payload = json.loads(bridge.read_string(address))
        bridge.free_string(address)

        assert payload == {"success": True, "ast": []}

    def test_concurrent_calls(self, bridge):
        """Test calls from several threads get independent buffers."""
        statements = [f"SELECT {i}" for i in range(20)]

        with ThreadPoolExecutor(max_workers=4) as executor:
            addresses = list(executor.map(bridge.parse_sql, statements))

        assert len(set(addresses)) == len(statements)
        texts = [json.loads(bridge.read_string(a))["ast"][0]["text"] for a in addresses]
        assert texts == statements

        for address in addresses:
            bridge.free_string(address)
        assert bridge.outstanding == 0


class TestCEntryPoints:
    """Test the C-callable function pointers."""

    def test_parse_and_free_through_ctypes(self, bridge):
        parse_sql, free_string = bridge.c_entry_points()

        address = parse_sql(b"SELECT 1")
        payload = json.loads(ctypes.string_at(address))
        assert payload["success"] is True

        free_string(address)
        assert bridge.outstanding == 0

    def test_entry_points_are_cached(self, bridge):
        assert bridge.c_entry_points() is bridge.c_entry_points()

    def test_invalid_free_is_logged(self, bridge, caplog):
        """Test a bad release from native code is logged, not raised."""
        _, free_string = bridge.c_entry_points()

        with caplog.at_level(logging.ERROR, logger="mysql_parser.bridge"):
            free_string(4242)

        assert any("Invalid release" in r.getMessage() for r in caplog.records)


def test_module_level_entry_points():
    """Test the process-wide bridge."""
    address = bridge_module.parse_sql("SELECT 1")
    payload = json.loads(bridge_module.get_bridge().read_string(address))
    bridge_module.free_string(address)

    assert payload["success"] is True
    assert bridge_module.get_bridge() is bridge_module.get_bridge()
