"""
Tests for KV diagnostic records.
"""

import numpy as np
import pytest

from optiloop import KV, make_kv


def test_preserves_insertion_order():
    kv = KV().set("b", 1).set("a", 2.0).set("c", "x")
    assert list(kv) == ["b", "a", "c"]


def test_numpy_scalars_are_coerced():
    """numpy scalars become plain Python values."""
    kv = make_kv(n=np.int64(3), x=np.float32(0.5), flag=np.bool_(True))

    assert type(kv["n"]) is int
    assert type(kv["x"]) is float
    assert kv["flag"] is True


def test_bool_stays_bool():
    kv = make_kv(done=True, count=1)
    assert kv["done"] is True
    assert type(kv["count"]) is int


def test_rejects_unsupported_values():
    with pytest.raises(TypeError):
        KV().set("vector", np.zeros(3))
    with pytest.raises(TypeError):
        KV().set("nothing", None)
    with pytest.raises(TypeError):
        KV().set(1, 1.0)


def test_merge_overrides_and_keeps_order():
    """Later entries overwrite earlier ones without moving them."""
    base = make_kv(iter=1, cost=3.0)
    merged = base.merge(make_kv(cost=2.0, step=0.1))

    assert list(merged) == ["iter", "cost", "step"]
    assert merged["cost"] == 2.0
    # Original is unchanged
    assert base["cost"] == 3.0
    assert base.merge(None) == base


def test_to_dict_and_get():
    kv = make_kv(a=1)
    assert kv.to_dict() == {"a": 1}
    assert kv.get("missing") is None
    assert kv.get("missing", 5) == 5
    assert "a" in kv
    assert len(kv) == 1


def test_copy_is_independent():
    kv = KV().set("cost", 1.0).set("iter", 3)
    clone = kv.copy()
    clone.set("cost", -1.0)

    assert kv["cost"] == 1.0
    assert list(clone.keys()) == ["cost", "iter"]
