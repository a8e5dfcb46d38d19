"""
Printer probe for the Printer Discovery Module.

A host is considered a printer when it answers an SNMP v2c GET of
``hrPrinterStatus.1`` with an actual value. Hosts that do not answer, answer
with an error, or report the object as absent are simply not printers.
"""

from typing import Callable, Optional

from ..core import printer_oids
from ..core.data_models import DiscoveredPrinter, ValueKind
from ..utils.error_handler import (
    ConnectError,
    PrinterDiscoveryError,
    ProtocolMiss,
    SNMPResponseError,
)
from ..utils.logger import Logger, get_logger
from .snmp_client import SNMPClient

ClientFactory = Callable[[str], SNMPClient]


class PrinterProbe:
    """
    Decides whether an address hosts an SNMP printer and resolves its name.

    Instances are callable, so a probe can be handed directly to
    ``DiscoveryWorkerPool``.
    """

    def __init__(self, client_factory: ClientFactory, logger: Optional[Logger] = None):
        """
        Initialize the probe.

        Args:
            client_factory: Builds an unconnected SNMPClient for an address
            logger: Logger instance for diagnostics
        """
        self.client_factory = client_factory
        self.logger = logger or get_logger(__name__)

    def __call__(self, address: str) -> Optional[DiscoveredPrinter]:
        return self.probe(address)

    def probe(self, address: str) -> Optional[DiscoveredPrinter]:
        """
        Probe one address.

        Args:
            address: IPv4 address to probe

        Returns:
            DiscoveredPrinter on a positive match, None otherwise
        """
        client = self.client_factory(address)
        try:
            client.connect()
            self._check_printer_status(client)
            name = self._resolve_name(client)
            return DiscoveredPrinter(address=address, name=name)
        except (ConnectError, ProtocolMiss, SNMPResponseError) as e:
            self.logger.debug(f"{address} is not an SNMP printer: {e}")
            return None
        finally:
            client.close()

    def _check_printer_status(self, client: SNMPClient) -> None:
        var_binds = client.get([printer_oids.HR_PRINTER_STATUS])
        if not var_binds:
            raise ProtocolMiss(f"{client.host}: empty response for hrPrinterStatus")
        if var_binds[0].value.kind is ValueKind.NOT_PRESENT:
            raise ProtocolMiss(
                f"{client.host}: hrPrinterStatus {var_binds[0].value.type_name}"
            )

    def _resolve_name(self, client: SNMPClient) -> Optional[str]:
        """
        Best-effort naming lookup.

        Returns the first non-empty string among printer name, sysDescr and
        sysName, in that order. Failures leave the printer unnamed.
        """
        try:
            var_binds = client.get(list(printer_oids.NAMING_OIDS))
        except PrinterDiscoveryError as e:
            self.logger.debug(f"Name lookup failed for {client.host}: {e}")
            return None

        values = {var_bind.oid.lstrip("."): var_bind.value for var_bind in var_binds}
        for oid in printer_oids.NAMING_OIDS:
            value = values.get(oid)
            text = value.as_string() if value else None
            if text:
                return text
        return None
