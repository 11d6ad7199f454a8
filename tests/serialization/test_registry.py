"""Tests for the identity-keyed registry used during one serialization call."""

from __future__ import annotations

import pytest

from sprout.serialization import VisitedRegistry


def test_register_assigns_sequential_ids() -> None:
    registry = VisitedRegistry()
    first, second = {}, []

    assert registry.register(first) == 0
    assert registry.register(second) == 1
    assert len(registry) == 2
    assert registry.lookup(first) == 0
    assert registry.lookup(second) == 1


def test_lookup_uses_identity_not_equality() -> None:
    registry = VisitedRegistry()
    registry.register({"v": 1})

    assert registry.lookup({"v": 1}) is None
    assert {"v": 1} not in registry


def test_register_twice_is_rejected() -> None:
    registry = VisitedRegistry()
    obj: list[int] = []
    registry.register(obj)

    with pytest.raises(ValueError, match="already registered"):
        registry.register(obj)


def test_registry_keeps_registered_objects_alive() -> None:
    registry = VisitedRegistry()
    registry.register({})
    # 临时对象被回收后若复用同一 id，新对象不应被误判为已登记
    for _ in range(100):
        assert registry.lookup({}) is None
