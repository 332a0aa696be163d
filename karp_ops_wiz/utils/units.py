from __future__ import annotations

import re


_CPU_M_PATTERN = re.compile(r"^(?P<val>\d+(?:\.\d+)?)m$")
_NUM_PATTERN = re.compile(r"^(?P<val>\d+(?:\.\d+)?)$")

_MEM_PATTERN = re.compile(
    r"^(?P<val>\d+(?:\.\d+)?)(?P<unit>Ki|Mi|Gi|Ti|Pi|k|K|M|G|T|P|KB|MB|GB|TB)?$"
)

_MEM_MULTIPLIERS = {
    None: 1,
    "Ki": 1024,
    "Mi": 1024 ** 2,
    "Gi": 1024 ** 3,
    "Ti": 1024 ** 4,
    "Pi": 1024 ** 5,
    "k": 1_000,
    "K": 1_000,
    "KB": 1_000,
    "M": 1_000_000,
    "MB": 1_000_000,
    "G": 1_000_000_000,
    "GB": 1_000_000_000,
    "T": 1_000_000_000_000,
    "TB": 1_000_000_000_000,
    "P": 1_000_000_000_000_000,
}

GIB = 1024 ** 3


def parse_cpu_milli(value: str | int | float) -> int:
    """Parse a Kubernetes CPU quantity to milli-cores.

    - 500m => 500
    - 1 => 1000
    - 0.5 => 500
    """
    s = str(value).strip()
    m = _CPU_M_PATTERN.match(s)
    if m:
        return int(round(float(m.group("val"))))
    m = _NUM_PATTERN.match(s)
    if m:
        return int(round(float(m.group("val")) * 1000))
    raise ValueError(f"Unknown CPU unit: {value}")


def parse_mem_bytes(value: str | int | float) -> int:
    """Parse a Kubernetes memory quantity to bytes.

    Supports binary suffixes (Ki, Mi, Gi, Ti, Pi), decimal suffixes
    (k, M, G, T, P and the KB/MB/GB/TB spellings) and plain byte counts.
    """
    s = str(value).strip()
    m = _MEM_PATTERN.match(s)
    if not m:
        raise ValueError(f"Unknown memory unit: {value}")
    return int(round(float(m.group("val")) * _MEM_MULTIPLIERS[m.group("unit")]))


def bytes_to_gib(value: int) -> int:
    # whole GiB, truncated
    return int(value) // GIB
