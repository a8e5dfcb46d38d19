"""
Object identifiers queried by the printer scanner.

Host Resources MIB (RFC 2790), SNMPv2-MIB and Printer MIB (RFC 3805) objects.
OIDs are written without a leading dot, the way pysnmp renders them.
"""

SYS_DESCR = "1.3.6.1.2.1.1.1.0"
SYS_NAME = "1.3.6.1.2.1.1.5.0"
HR_PRINTER_STATUS = "1.3.6.1.2.1.25.3.5.1.1.1"
PRT_GENERAL_PRINTER_NAME = "1.3.6.1.2.1.43.5.1.1.16.1"
PRT_MARKER_LIFE_COUNT = "1.3.6.1.2.1.43.10.2.1.4.1"

# Tried in order, first non-empty string wins
NAMING_OIDS = (PRT_GENERAL_PRINTER_NAME, SYS_DESCR, SYS_NAME)

# Single-value objects fetched in one request for the device report
DETAIL_OIDS = (SYS_DESCR, HR_PRINTER_STATUS, PRT_GENERAL_PRINTER_NAME, PRT_MARKER_LIFE_COUNT)

# prtMarkerSuppliesTable
SUPPLIES_TABLE = "1.3.6.1.2.1.43.11.1.1"
SUPPLY_DESCRIPTION_COLUMN = 6
SUPPLY_MAX_CAPACITY_COLUMN = 8
SUPPLY_LEVEL_COLUMN = 9

# prtInputTable
INPUT_TABLE = "1.3.6.1.2.1.43.8.2.1"
INPUT_NAME_COLUMN = 2
INPUT_MAX_CAPACITY_COLUMN = 8
INPUT_CURRENT_LEVEL_COLUMN = 9


def split_table_oid(oid: str, table_root: str):
    """
    Split a table entry OID into ``(column, index)``.

    The column is the first component after the table root and the index is
    the last component of the OID. Returns None for OIDs outside the table or
    without an index.
    """
    oid = oid.lstrip(".")
    prefix = table_root.lstrip(".") + "."
    if not oid.startswith(prefix):
        return None
    parts = oid[len(prefix):].split(".")
    if len(parts) < 2:
        return None
    try:
        return int(parts[0]), int(parts[-1])
    except ValueError:
        return None
