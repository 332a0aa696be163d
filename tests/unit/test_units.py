from __future__ import annotations

import pytest

from karp_ops_wiz.utils.units import bytes_to_gib, parse_cpu_milli, parse_mem_bytes


def test_parse_cpu_units():
    assert parse_cpu_milli("500m") == 500
    assert parse_cpu_milli("1") == 1000
    assert parse_cpu_milli(2) == 2000
    assert parse_cpu_milli(0.25) == 250


def test_parse_mem_units():
    assert parse_mem_bytes("256Mi") == 268435456
    assert parse_mem_bytes("1Gi") == 1073741824
    assert parse_mem_bytes("100M") == 100_000_000
    assert parse_mem_bytes("1GB") == 1_000_000_000
    assert parse_mem_bytes(4096) == 4096


def test_unknown_units_raise():
    with pytest.raises(ValueError):
        parse_cpu_milli("two")
    with pytest.raises(ValueError):
        parse_mem_bytes("12Xi")


def test_bytes_to_gib_truncates():
    assert bytes_to_gib(16093056 * 1024) == 15
