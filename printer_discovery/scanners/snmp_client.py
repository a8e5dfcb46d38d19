"""
SNMP client for the Printer Discovery Module.

This module wraps the pysnmp 7.x asyncio API behind a small synchronous
interface (connect, get, walk, close) so that discovery workers running in
threads can each drive their own SNMP session. Raw pysnmp values are decoded
into the closed ``SnmpValue`` variant at this boundary.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import AsyncIterator, Iterator, List, Optional, Sequence

from pysnmp.error import PySnmpError
from pysnmp.hlapi.v3arch.asyncio import (
    CommunityData,
    ContextData,
    ObjectIdentity,
    ObjectType,
    SnmpEngine,
    UdpTransportTarget,
    get_cmd,
    walk_cmd,
)
from pysnmp.proto import rfc1902
from pysnmp.proto.rfc1905 import EndOfMibView, NoSuchInstance, NoSuchObject

from ..config.config_loader import SNMPConfig
from ..core.data_models import SnmpValue, VarBind
from ..utils.error_handler import ConnectError, SNMPResponseError
from ..utils.logger import Logger, get_logger

_ABSENT_TYPES = (NoSuchObject, NoSuchInstance, EndOfMibView)

# OctetString subclasses that are not text
_NON_TEXT_OCTET_TYPES = (rfc1902.IpAddress, rfc1902.Opaque, rfc1902.Bits)

_INTEGER_TYPES = (
    rfc1902.Integer,
    rfc1902.Integer32,
    rfc1902.Counter32,
    rfc1902.Gauge32,
    rfc1902.Unsigned32,
    rfc1902.Counter64,
)


def decode_value(value) -> SnmpValue:
    """
    Decode a pysnmp value into an ``SnmpValue``.

    Args:
        value: Value part of a pysnmp var-bind

    Returns:
        STRING for octet strings, INTEGER for integer and counter types,
        NOT_PRESENT for the v2c exception values, WRONG_TYPE for anything else
    """
    type_name = type(value).__name__

    if isinstance(value, _ABSENT_TYPES):
        return SnmpValue.not_present(type_name)
    if isinstance(value, _NON_TEXT_OCTET_TYPES):
        return SnmpValue.wrong_type(type_name)
    if isinstance(value, rfc1902.OctetString):
        text = value.asOctets().decode("utf-8", errors="replace").rstrip("\x00")
        return SnmpValue.string(text)
    if isinstance(value, rfc1902.TimeTicks):
        return SnmpValue.wrong_type(type_name)
    if isinstance(value, _INTEGER_TYPES):
        return SnmpValue.integer(int(value))
    return SnmpValue.wrong_type(type_name)


class SNMPClient(ABC):
    """
    Synchronous SNMP v2c session with one target.

    Implementations must bound every network operation by a timeout so
    that no call blocks indefinitely.
    """

    host: str

    @abstractmethod
    def connect(self) -> None:
        """
        Prepare the transport to the target.

        Raises:
            ConnectError: If the target cannot be addressed
        """

    @abstractmethod
    def get(self, oids: Sequence[str]) -> List[VarBind]:
        """
        Fetch several objects in one request.

        Raises:
            ConnectError: On timeout or transport failure
            SNMPResponseError: If the agent answers with an error status
        """

    @abstractmethod
    def walk(self, base_oid: str) -> Iterator[VarBind]:
        """
        Lazily traverse the subtree rooted at ``base_oid``.

        Raises:
            ConnectError: On timeout or transport failure
            SNMPResponseError: If the agent answers with an error status
        """

    @abstractmethod
    def close(self) -> None:
        """Release the session. Safe to call more than once."""

    def __enter__(self) -> "SNMPClient":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()


class PySNMPClient(SNMPClient):
    """
    ``SNMPClient`` backed by pysnmp.

    Each client owns a private event loop and SNMP engine, so one client per
    worker thread is safe.
    """

    def __init__(
        self,
        host: str,
        community: str = "public",
        snmp_config: Optional[SNMPConfig] = None,
        logger: Optional[Logger] = None,
    ):
        self.host = host
        self.community = community
        self.config = snmp_config or SNMPConfig()
        self.logger = logger or get_logger(__name__)

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._engine: Optional[SnmpEngine] = None
        self._transport: Optional[UdpTransportTarget] = None
        self._auth_data = CommunityData(community, mpModel=1)  # SNMPv2c
        self._context_data = ContextData()

    @property
    def connected(self) -> bool:
        return self._transport is not None

    def connect(self) -> None:
        if self.connected:
            return

        self._loop = asyncio.new_event_loop()
        try:
            self._loop.run_until_complete(self._open())
        except PySnmpError as e:
            self.close()
            raise ConnectError(
                f"Cannot open SNMP transport to {self.host}:{self.config.port}: {e}"
            ) from e
        except OSError as e:
            self.close()
            raise ConnectError(
                f"Cannot open SNMP transport to {self.host}:{self.config.port}: {e}"
            ) from e

    async def _open(self) -> None:
        self._engine = SnmpEngine()
        self._transport = await UdpTransportTarget.create(
            (self.host, self.config.port),
            timeout=self.config.timeout,
            retries=self.config.retries,
        )

    def get(self, oids: Sequence[str]) -> List[VarBind]:
        self._require_connection()
        return self._loop.run_until_complete(self._get(oids))

    async def _get(self, oids: Sequence[str]) -> List[VarBind]:
        try:
            error_indication, error_status, error_index, var_binds = await get_cmd(
                self._engine,
                self._auth_data,
                self._transport,
                self._context_data,
                *[ObjectType(ObjectIdentity(oid)) for oid in oids],
                lookupMib=False,
            )
        except PySnmpError as e:
            raise ConnectError(f"SNMP GET to {self.host} failed: {e}") from e

        self._check_response(error_indication, error_status, error_index, var_binds)

        return [
            VarBind(name.prettyPrint(), decode_value(value))
            for name, value in var_binds
        ]

    def walk(self, base_oid: str) -> Iterator[VarBind]:
        self._require_connection()
        walker = self._walk(base_oid.lstrip("."))
        try:
            while True:
                try:
                    var_bind = self._loop.run_until_complete(walker.__anext__())
                except StopAsyncIteration:
                    return
                yield var_bind
        finally:
            if self._loop is not None and not self._loop.is_closed():
                self._loop.run_until_complete(walker.aclose())

    async def _walk(self, base_oid: str) -> AsyncIterator[VarBind]:
        prefix = base_oid + "."
        try:
            iterator = walk_cmd(
                self._engine,
                self._auth_data,
                self._transport,
                self._context_data,
                ObjectType(ObjectIdentity(base_oid)),
                lookupMib=False,
                lexicographicMode=False,  # Stop at end of subtree
                ignoreNonIncreasingOid=True,
            )

            async for error_indication, error_status, error_index, var_binds in iterator:
                self._check_response(error_indication, error_status, error_index, var_binds)

                for name, value in var_binds:
                    if isinstance(value, EndOfMibView):
                        return
                    oid = name.prettyPrint()
                    if not oid.startswith(prefix):
                        return
                    yield VarBind(oid, decode_value(value))

        except PySnmpError as e:
            raise ConnectError(f"SNMP walk of {base_oid} on {self.host} failed: {e}") from e

    def _check_response(self, error_indication, error_status, error_index, var_binds) -> None:
        if error_indication:
            raise ConnectError(f"{self.host}: {error_indication}")

        if error_status:
            problematic = (
                var_binds[int(error_index) - 1][0] if error_index else "?"
            )
            raise SNMPResponseError(
                f"{self.host}: {error_status.prettyPrint()} at {problematic}"
            )

    def _require_connection(self) -> None:
        if not self.connected:
            raise ConnectError(f"SNMP session to {self.host} is not connected")

    def close(self) -> None:
        loop, engine = self._loop, self._engine
        self._loop = None
        self._engine = None
        self._transport = None

        if loop is None or loop.is_closed():
            return
        try:
            if engine is not None:
                engine.close_dispatcher()
            loop.run_until_complete(loop.shutdown_asyncgens())
        except PySnmpError as e:
            self.logger.debug(f"Error closing SNMP session to {self.host}: {e}")
        finally:
            loop.close()
