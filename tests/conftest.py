"""Pytest configuration and fixtures."""

import os
import sys
import tempfile
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from printer_discovery.core import printer_oids
from printer_discovery.core.data_models import SnmpValue, VarBind
from printer_discovery.scanners.snmp_client import SNMPClient
from printer_discovery.utils.error_handler import ConnectError, SNMPResponseError
from printer_discovery.utils.logger import LogLevel, set_log_level


@dataclass
class FakeAgent:
    """Canned SNMP agent behaviour for one address."""

    scalars: Dict[str, SnmpValue] = field(default_factory=dict)
    tables: Dict[str, List[VarBind]] = field(default_factory=dict)
    walk_errors: Dict[str, Exception] = field(default_factory=dict)
    get_error: Optional[Exception] = None
    connect_error: Optional[Exception] = None


class FakeSNMPClient(SNMPClient):
    """In-memory SNMPClient answering from a FakeAgent. No agent means no host."""

    def __init__(self, host: str, agent: Optional[FakeAgent]):
        self.host = host
        self.agent = agent
        self.connected = False
        self.closed = False
        self.requests: List[List[str]] = []

    def connect(self) -> None:
        if self.agent is None:
            raise ConnectError(f"{self.host}: No SNMP response received before timeout")
        if self.agent.connect_error is not None:
            raise self.agent.connect_error
        self.connected = True

    def get(self, oids):
        if not self.connected:
            raise ConnectError(f"SNMP session to {self.host} is not connected")
        self.requests.append(list(oids))
        if self.agent.get_error is not None:
            raise self.agent.get_error
        return [
            VarBind(oid, self.agent.scalars.get(oid, SnmpValue.not_present()))
            for oid in oids
        ]

    def walk(self, base_oid):
        if not self.connected:
            raise ConnectError(f"SNMP session to {self.host} is not connected")
        if base_oid in self.agent.walk_errors:
            raise self.agent.walk_errors[base_oid]
        for var_bind in self.agent.tables.get(base_oid, []):
            yield var_bind

    def close(self) -> None:
        self.closed = True


class FakeNetwork:
    """Address -> FakeAgent mapping that hands out FakeSNMPClients."""

    def __init__(self, agents: Optional[Dict[str, FakeAgent]] = None):
        self.agents = dict(agents or {})
        self.clients: List[FakeSNMPClient] = []
        self._lock = threading.Lock()

    def client_factory(self, address: str) -> FakeSNMPClient:
        client = FakeSNMPClient(address, self.agents.get(address))
        with self._lock:
            self.clients.append(client)
        return client

    def clients_for(self, address: str) -> List[FakeSNMPClient]:
        return [client for client in self.clients if client.host == address]


def supply_rows(index: int, description=None, level=None, capacity=None) -> List[VarBind]:
    """Rows of prtMarkerSuppliesTable for one supply (hrDeviceIndex 1)."""
    root = printer_oids.SUPPLIES_TABLE
    rows = []
    if description is not None:
        rows.append(VarBind(f"{root}.6.1.{index}", SnmpValue.string(description)))
    if capacity is not None:
        rows.append(VarBind(f"{root}.8.1.{index}", SnmpValue.integer(capacity)))
    if level is not None:
        rows.append(VarBind(f"{root}.9.1.{index}", SnmpValue.integer(level)))
    return rows


def tray_rows(index: int, name=None, level=None, capacity=None) -> List[VarBind]:
    """Rows of prtInputTable for one tray (hrDeviceIndex 1)."""
    root = printer_oids.INPUT_TABLE
    rows = []
    if name is not None:
        rows.append(VarBind(f"{root}.2.1.{index}", SnmpValue.string(name)))
    if capacity is not None:
        rows.append(VarBind(f"{root}.8.1.{index}", SnmpValue.integer(capacity)))
    if level is not None:
        rows.append(VarBind(f"{root}.9.1.{index}", SnmpValue.integer(level)))
    return rows


def printer_agent(
    name: Optional[str] = "HP LaserJet M404",
    status: int = 3,
    pages: int = 12345,
    description: str = "HP ETHERNET MULTI-ENVIRONMENT",
    with_tables: bool = True,
) -> FakeAgent:
    """A FakeAgent that looks like a typical laser printer."""
    scalars = {
        printer_oids.SYS_DESCR: SnmpValue.string(description),
        printer_oids.SYS_NAME: SnmpValue.string("NPI1A2B3C"),
        printer_oids.HR_PRINTER_STATUS: SnmpValue.integer(status),
        printer_oids.PRT_MARKER_LIFE_COUNT: SnmpValue.integer(pages),
    }
    if name is not None:
        scalars[printer_oids.PRT_GENERAL_PRINTER_NAME] = SnmpValue.string(name)

    tables = {}
    if with_tables:
        tables[printer_oids.SUPPLIES_TABLE] = (
            supply_rows(1, "Black Cartridge HP CF259A", level=80, capacity=100)
            + supply_rows(2, "Imaging Drum", level=-3, capacity=100)
        )
        tables[printer_oids.INPUT_TABLE] = (
            tray_rows(1, "Tray 1", level=50, capacity=100)
            + tray_rows(2, "Tray 2", level=125, capacity=250)
        )
    return FakeAgent(scalars=scalars, tables=tables)


@pytest.fixture(autouse=True)
def reset_log_level():
    """Keep the process-wide log level at INFO between tests."""
    set_log_level(LogLevel.INFO)
    yield
    set_log_level(LogLevel.INFO)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fake_network():
    """An empty FakeNetwork; tests register agents on it."""
    return FakeNetwork()


@pytest.fixture
def printer_network():
    """A /29 with two printers, one plain SNMP host and nothing else."""
    return FakeNetwork({
        "10.0.0.2": printer_agent(name="Front Desk"),
        "10.0.0.5": printer_agent(name=None, description="Brother HL-L2350DW"),
        "10.0.0.6": FakeAgent(scalars={
            printer_oids.SYS_DESCR: SnmpValue.string("Linux router 5.10"),
        }),
    })
