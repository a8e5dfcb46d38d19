"""
Text rendering of printer scan output.

Formats discovery notifications, scan summaries and per-device reports as
the lines printed to the console. Rendering is pure: callers decide where
the lines go.
"""

from typing import List, Optional

from ..core.data_models import DeviceReport, DiscoveredPrinter, SupplyRecord, TrayRecord


def format_scan_banner(cidr: str, workers: int) -> str:
    return f"🔎 Scanning network {cidr} with {workers} workers for SNMP-enabled printers..."


def format_discovery(printer: DiscoveredPrinter) -> str:
    return f"🎯 Found printer: {printer.address} → {printer.display_name}"


def format_found_summary(count: int) -> str:
    if count == 0:
        return "❌ No SNMP printers found!"
    return f"✅ Found {count} SNMP printers:"


def format_status(code: int, name: Optional[str]) -> str:
    """Mapped status name, or the raw code flagged as unknown."""
    if name:
        return name
    return f"{code} (unknown)"


def format_level(level: Optional[int], capacity: Optional[int], percent: Optional[int], unknown: bool) -> str:
    """
    Render a level with its percentage of capacity when computable.

    ``80, 100`` renders as ``80 (80% of 100)``; a sentinel level renders as
    ``-3 (unknown)``; anything else is the bare level.
    """
    text = "n/a" if level is None else str(level)
    if percent is not None:
        return f"{text} ({percent}% of {capacity})"
    if unknown:
        return f"{text} (unknown)"
    return text


def format_supply(supply: SupplyRecord) -> str:
    description = supply.description or "Unknown Supply"
    level = format_level(
        supply.level, supply.max_capacity, supply.percent_of_capacity, supply.level_unknown
    )
    return f"    - {description}: {level}"


def format_tray(tray: TrayRecord) -> str:
    name = tray.name or "Unknown Tray"
    level = format_level(
        tray.current_level, tray.max_capacity, tray.percent_of_capacity, tray.level_unknown
    )
    return f"    - {name}: {level}"


def render_device_report(report: DeviceReport) -> List[str]:
    """
    Render a full device report.

    Absent scalar fields are omitted; an empty table is reported explicitly
    with the reason it has no data. Table rows are in ascending index order.
    """
    lines = ["", f"🖨️ Printer Report for {report.address}:"]

    if report.system_description:
        lines.append(f"  System Description: {report.system_description}")
    if report.printer_name:
        lines.append(f"  Printer Name: {report.printer_name}")
    if report.status_code is not None:
        lines.append(f"  Printer Status: {format_status(report.status_code, report.status_name)}")
    if report.page_count is not None:
        lines.append(f"  Total Pages Printed: {report.page_count}")

    if report.supplies:
        lines.append("  Supplies:")
        lines.extend(format_supply(report.supplies[index]) for index in sorted(report.supplies))
    else:
        lines.append(f"  Supplies: (No data available: {report.supplies_error or 'no entries returned'})")

    if report.trays:
        lines.append("  Paper Trays:")
        lines.extend(format_tray(report.trays[index]) for index in sorted(report.trays))
    else:
        lines.append(f"  Paper Trays: (No data available: {report.trays_error or 'no entries returned'})")

    return lines


def format_device_failure(address: str, error: Exception, operation: str) -> str:
    """Failure line for a device whose report was aborted during ``operation``."""
    if operation == "connect":
        return f"❌ Failed to connect to {address}: {error}"
    return f"❌ SNMP Get error for {address}: {error}"
