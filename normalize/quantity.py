import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from kubernetes.utils import parse_quantity


# Byte-style units accepted on the command line, mapped to the suffix
# Kubernetes quantities use for the same multiplier. Keys are lowercase.
_UNIT_SUFFIXES = {
    "": "",
    "b": "",
    "k": "k", "kb": "k", "ki": "Ki", "kib": "Ki",
    "m": "M", "mb": "M", "mi": "Mi", "mib": "Mi",
    "g": "G", "gb": "G", "gi": "Gi", "gib": "Gi",
    "t": "T", "tb": "T", "ti": "Ti", "tib": "Ti",
    "p": "P", "pb": "P", "pi": "Pi", "pib": "Pi",
    "e": "E", "eb": "E", "ei": "Ei", "eib": "Ei",
}

_AMOUNT_RE = re.compile(r"^\s*([0-9][0-9,]*(?:\.[0-9]*)?|\.[0-9]+)\s*([a-zA-Z]*)\s*$")


def quantity_to_bytes(value: Any) -> int:
    """Convert a Kubernetes quantity ("16Gi", "1234Ki", "512M") to bytes.

    Fractional results are rounded up. Missing values count as zero.
    """
    if value is None or value == "":
        return 0
    return int(math.ceil(parse_quantity(value)))


def parse_memory_amount(text: Optional[str]) -> int:
    """Parse a human-readable memory amount such as "512MiB" or "1.5 GB".

    Units are case-insensitive; K/KB are powers of 1000 and Ki/KiB powers of
    1024. Commas are accepted as thousands separators. An empty value is zero.
    """
    if text is None or not text.strip():
        return 0

    match = _AMOUNT_RE.match(text)
    if not match:
        raise ValueError(f"invalid memory amount: {text!r}")

    number, unit = match.groups()
    suffix = _UNIT_SUFFIXES.get(unit.lower())
    if suffix is None:
        raise ValueError(f"unknown memory unit {unit!r} in {text!r}")

    try:
        amount = Decimal(number.replace(",", ""))
    except InvalidOperation:
        raise ValueError(f"invalid memory amount: {text!r}")

    return int(parse_quantity(f"{amount}{suffix}"))


def format_bytes(value: int) -> str:
    return f"{value:,}"


def format_efficiency(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return f"{value:.2f}"
