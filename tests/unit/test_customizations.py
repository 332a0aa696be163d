from __future__ import annotations

import pytest

from karp_ops_wiz.models.resources import ConfigRequest, Customizations


@pytest.mark.parametrize(
    "raw,expected",
    [
        (30, 30),
        (30.9, 30),
        ("120", 120),
        (0, 0),
        (True, None),
        ("later", None),
        (-5, None),
        (float("nan"), None),
        ([30], None),
        (None, None),
    ],
)
def test_ttl_after_empty_conversion(raw, expected):
    c = Customizations.from_mapping({"ttlSecondsAfterEmpty": raw})
    assert c.ttl_seconds_after_empty == expected


def test_unknown_keys_are_ignored():
    c = Customizations.from_mapping({"ttlSecondsUntilExpired": 10, "color": "blue"})
    assert c.ttl_seconds_after_empty is None


def test_request_accepts_raw_mapping():
    req = ConfigRequest(
        preset="balanced",
        region="us-east-1",
        customizations={"ttlSecondsAfterEmpty": 15},
    )
    assert req.customizations.ttl_seconds_after_empty == 15
    assert ConfigRequest(preset="x", region="y", customizations=None).customizations == Customizations()


def test_feature_lookup_requires_true():
    req = ConfigRequest(preset="balanced", region="us-east-1", features={"consolidation": False})
    assert req.feature("consolidation") is False
    assert req.feature("missing") is False
