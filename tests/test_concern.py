import dataclasses

import pytest

from writeack.concern import UNSET, AckSpec, Count, Label, Unset, coerce_w
from writeack.errors import InvalidArgument


@pytest.mark.parametrize("n", [0, 1, 2, 3, 50])
def test_from_count_acknowledged_only_when_positive(n):
    spec = AckSpec.from_count(n)
    assert spec.w == Count(n)
    assert spec.timeout_ms == 0
    assert spec.fsync is False
    assert spec.journal is False
    assert spec.is_acknowledged() == (n > 0)
    assert not spec.is_server_default()


def test_from_count_rejects_negative():
    with pytest.raises(InvalidArgument):
        AckSpec.from_count(-1)


def test_count_rejects_bool():
    with pytest.raises(InvalidArgument):
        AckSpec.from_count(True)


@pytest.mark.parametrize("label", [None, ""])
def test_from_label_rejects_missing(label):
    with pytest.raises(InvalidArgument):
        AckSpec.from_label(label)


@pytest.mark.parametrize("label", ["majority", "dc-east", "2"])
def test_labels_are_always_acknowledged(label):
    spec = AckSpec.from_label(label)
    assert spec.w == Label(label)
    assert spec.is_acknowledged()


def test_unset_is_server_default_and_acknowledged():
    spec = AckSpec.unset()
    assert spec.is_server_default()
    assert spec.is_acknowledged()
    assert spec.w == UNSET
    assert spec is AckSpec.unset()
    assert spec == AckSpec()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"timeout_ms": 100},
        {"fsync": True},
        {"journal": True},
    ],
)
def test_unset_rejects_qualifiers(kwargs):
    with pytest.raises(InvalidArgument):
        AckSpec.make(Unset(), **kwargs)


def test_make_validates_fields():
    with pytest.raises(InvalidArgument):
        AckSpec.make(1, timeout_ms=-1)
    with pytest.raises(InvalidArgument):
        AckSpec.make(1, fsync="yes")
    with pytest.raises(InvalidArgument):
        AckSpec(w=2)
    with pytest.raises(InvalidArgument):
        AckSpec.make(1.5)


def test_make_accepts_variants_and_raw_values():
    assert AckSpec.make(Count(2), 10) == AckSpec.make(2, 10)
    assert AckSpec.make(Label("majority")) == AckSpec.make("majority")
    assert AckSpec.make(None) == AckSpec.unset()


def test_make_allows_fsync_with_journal():
    spec = AckSpec.make(1, 0, True, True)
    assert spec.fsync and spec.journal


def test_coerce_w():
    assert coerce_w(None) is UNSET
    assert coerce_w(3) == Count(3)
    assert coerce_w("tag") == Label("tag")
    assert coerce_w(Label("x")) == Label("x")
    with pytest.raises(InvalidArgument):
        coerce_w(False)
    with pytest.raises(InvalidArgument):
        coerce_w(["majority"])


def test_instances_are_frozen():
    spec = AckSpec.from_count(1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        spec.timeout_ms = 5  # type: ignore[misc]


def test_with_operations_leave_receiver_untouched():
    base = AckSpec.make(2, 1000, False, True)

    assert base.with_count(3) == AckSpec.make(3, 1000, False, True)
    assert base.with_label("majority") == AckSpec.make("majority", 1000, False, True)
    assert base.with_timeout(0) == AckSpec.make(2, 0, False, True)
    assert base.with_fsync(True) == AckSpec.make(2, 1000, True, True)
    assert base.with_journal(False) == AckSpec.make(2, 1000, False, False)

    assert base == AckSpec.make(2, 1000, False, True)


def test_with_operations_revalidate():
    base = AckSpec.from_count(1)
    with pytest.raises(InvalidArgument):
        base.with_count(-2)
    with pytest.raises(InvalidArgument):
        base.with_label("")
    with pytest.raises(InvalidArgument):
        base.with_timeout(-1)


def test_unset_promoted_to_w1():
    unset = AckSpec.unset()
    assert unset.with_journal(True) == AckSpec.make(Count(1), 0, False, True)
    assert unset.with_fsync(True) == AckSpec.make(Count(1), 0, True, False)
    assert unset.with_timeout(500) == AckSpec.make(Count(1), 500, False, False)
    # Even a no-op value promotes
    assert unset.with_timeout(0).w == Count(1)


def test_with_count_on_unset_keeps_defaults():
    assert AckSpec.unset().with_count(0) == AckSpec.from_count(0)


def test_label_is_not_promoted():
    assert AckSpec.from_label("majority").with_journal(True).w == Label("majority")


@pytest.mark.parametrize(
    "spec",
    [
        AckSpec.unset(),
        AckSpec.from_count(0),
        AckSpec.from_label("majority"),
        AckSpec.make(2, 250, True, False),
    ],
)
def test_with_timeout_is_idempotent(spec):
    assert spec.with_timeout(750).with_timeout(750) == spec.with_timeout(750)


def test_equality_and_hash():
    a = AckSpec.make(2, 100, False, True)
    b = AckSpec.from_count(2).with_timeout(100).with_journal(True)
    assert a == b
    assert hash(a) == hash(b)
    assert len({a, b, AckSpec.unset(), AckSpec()}) == 2

    assert AckSpec.from_count(2) != AckSpec.from_label("2")
    assert AckSpec.unset() != AckSpec.from_count(1)
    assert AckSpec.from_count(1) != AckSpec.make(1, 0, False, True)


def test_w_value():
    assert AckSpec.unset().w_value is None
    assert AckSpec.from_count(3).w_value == 3
    assert AckSpec.from_label("majority").w_value == "majority"


def test_majority_factory():
    spec = AckSpec.majority(timeout_ms=100, journal=True)
    assert spec == AckSpec.make("majority", 100, False, True)


def test_wire_document_empty_for_server_default():
    assert AckSpec.make(Unset(), 0, False, False).as_wire_document() == {}


def test_wire_document_omits_defaults():
    doc = AckSpec.make(Count(1), 5000, False, True).as_wire_document()
    assert doc == {"w": 1, "wtimeout": 5000, "j": True}
    assert "fsync" not in doc


def test_wire_document_field_order():
    doc = AckSpec.make("majority", 10, True, True).as_wire_document()
    assert list(doc) == ["w", "wtimeout", "fsync", "j"]
    assert doc["w"] == "majority"


def test_wire_document_keeps_zero_count():
    assert AckSpec.from_count(0).as_wire_document() == {"w": 0}


def test_str():
    assert str(AckSpec.make(1, 5, False, True)) == "AckSpec{w=1, wtimeout=5, fsync=False, j=True}"
    assert str(AckSpec.unset()) == "AckSpec{w=None, wtimeout=0, fsync=False, j=False}"
