"""
Unit tests for Bucketizer construction and first-match classification.
"""

import logging
import math
import threading

import pytest

from bucketize import Bucket, Bucketizer

INF = float("inf")
NAN = float("nan")


def test_single_bucket_middle_values():
    b = Bucketizer().add_bucket(0.0, 1.0, 0.5)

    assert b.classify(0.1) == 0.5
    assert b.classify(999.999) is None


def test_single_bucket_end_values():
    b = Bucketizer().add_bucket(0.0, 1.0, 0.5)

    assert b.classify(0.0) == 0.5
    assert b.classify(1.0) is None


def test_multiple_buckets_closed_ends():
    b = Bucketizer().add_bucket(-1.0, 0.0, -0.5).add_bucket(0.0, 1.0, 0.5)

    assert b.classify(0.0) == 0.5
    assert b.classify(-0.7) == -0.5
    assert b.classify(999.99) is None


def test_multiple_buckets_open_ends():
    b = Bucketizer().add_bucket(0.0, 1.0, 0.5).add_bucket(1.0, None, 1.5)

    assert b.classify(0.0) == 0.5
    assert b.classify(-0.7) is None
    assert b.classify(999.99) == 1.5


def test_reference_scenario(reference_bucketizer):
    assert reference_bucketizer.classify(12.34) == 15.0
    assert reference_bucketizer.classify(999.99) is None
    assert reference_bucketizer.classify(7.5) == 7.5
    assert reference_bucketizer.classify(3.9) == 0.0
    assert reference_bucketizer.classify(4.0) is None


@pytest.mark.parametrize("value", [0.0, -1.0, 1e300, -INF, INF, NAN])
def test_empty_bucketizer_never_matches(value):
    assert Bucketizer().classify(value) is None


class TestMatchTable:
    """One case per lower/upper presence combination."""

    @pytest.mark.parametrize("value", [-INF, -1e308, 0.0, 42.0, INF, NAN])
    def test_catch_all_matches_everything(self, value):
        assert Bucketizer().add_bucket(None, None, 9.0).classify(value) == 9.0

    def test_unbounded_below(self):
        b = Bucketizer().add_bucket(None, 4.0, 0.0)

        assert b.classify(3.999) == 0.0
        assert b.classify(-1e308) == 0.0
        assert b.classify(-INF) == 0.0
        assert b.classify(4.0) is None
        assert b.classify(INF) is None

    def test_unbounded_above(self):
        b = Bucketizer().add_bucket(10.0, None, 15.0)

        assert b.classify(10.0) == 15.0
        assert b.classify(1e308) == 15.0
        assert b.classify(INF) == 15.0
        assert b.classify(9.999) is None
        assert b.classify(-INF) is None

    def test_half_open_interval(self):
        b = Bucketizer().add_bucket(2.0, 3.0, 1.0)

        assert b.classify(2.0) == 1.0
        assert b.classify(2.5) == 1.0
        assert b.classify(3.0) is None
        assert b.classify(1.999) is None


def test_adjacent_buckets_share_boundary_with_second():
    b = Bucketizer().add_bucket(0.0, 5.0, 1.0).add_bucket(5.0, 10.0, 2.0)

    assert b.classify(5.0) == 2.0
    assert b.classify(4.999) == 1.0


def test_earlier_bucket_wins_on_overlap():
    b = Bucketizer().add_bucket(9.0, 100.0, 1.0).add_bucket(2.0, 50.0, 2.0)

    assert b.classify(20.0) == 1.0
    assert b.classify(5.0) == 2.0


def test_catch_all_first_shadows_later_buckets():
    b = (
        Bucketizer()
        .add_bucket(None, None, -1.0)
        .add_bucket(0.0, 10.0, 5.0)
        .add_bucket(10.0, None, 20.0)
    )

    for value in (-INF, 0.0, 5.0, 10.0, INF, NAN):
        assert b.classify(value) == -1.0


def test_catch_all_last_acts_as_default(reference_bucketizer):
    b = reference_bucketizer.add_bucket(None, None, -1.0)

    assert b.classify(999.99) == -1.0
    assert b.classify(4.0) == -1.0
    assert b.classify(12.34) == 15.0


def test_nan_input_only_matches_catch_all():
    b = (
        Bucketizer()
        .add_bucket(None, 0.0, 1.0)
        .add_bucket(0.0, None, 2.0)
        .add_bucket(-INF, INF, 3.0)
    )
    assert b.classify(NAN) is None

    assert b.add_bucket(None, None, 4.0).classify(NAN) == 4.0


def test_inverted_and_empty_ranges_are_inert():
    b = Bucketizer().add_bucket(5.0, 1.0, 1.0).add_bucket(3.0, 3.0, 2.0)

    assert len(b) == 2
    for value in (0.0, 1.0, 3.0, 4.0, 5.0):
        assert b.classify(value) is None


def test_nan_bound_never_matches():
    assert Bucketizer().add_bucket(NAN, None, 1.0).classify(0.0) is None
    assert Bucketizer().add_bucket(None, NAN, 1.0).classify(0.0) is None


def test_nan_output_is_returned_as_is():
    result = Bucketizer().add_bucket(None, None, NAN).classify(1.0)

    assert result is not None
    assert math.isnan(result)


def test_inert_bucket_logs_debug(caplog):
    with caplog.at_level(logging.DEBUG, logger="bucketize.bucketizer"):
        Bucketizer().add_bucket(5.0, 1.0, 1.0)

    assert "can never match" in caplog.text


class TestConstruction:
    """Builder semantics: ordering, immutability, equality."""

    def test_add_bucket_preserves_order(self):
        b = Bucketizer().add_bucket(1.0, 2.0, 10.0).add_bucket(None, 1.0, 20.0)

        assert b.buckets == (Bucket(1.0, 2.0, 10.0), Bucket(None, 1.0, 20.0))
        assert list(b) == list(b.buckets)

    def test_add_bucket_returns_new_instance(self):
        base = Bucketizer().add_bucket(0.0, 1.0, 0.5)
        extended = base.add_bucket(1.0, None, 1.5)

        assert len(base) == 1
        assert len(extended) == 2
        assert base.classify(5.0) is None
        assert extended.classify(5.0) == 1.5

    def test_branching_from_shared_prefix(self):
        base = Bucketizer().add_bucket(0.0, 1.0, 0.5)
        left = base.add_bucket(1.0, None, 1.0)
        right = base.add_bucket(1.0, None, 2.0)

        assert left.classify(3.0) == 1.0
        assert right.classify(3.0) == 2.0

    def test_buckets_are_frozen(self):
        b = Bucketizer().add_bucket(0.0, 1.0, 0.5)

        with pytest.raises(AttributeError):
            b.buckets[0].output = 2.0  # type: ignore[misc]
        with pytest.raises(AttributeError):
            b.buckets = ()  # type: ignore[misc]

    def test_equality_follows_bucket_sequence(self):
        a = Bucketizer().add_bucket(0.0, 1.0, 0.5).add_bucket(1.0, None, 1.5)
        b = Bucketizer().add_bucket(0.0, 1.0, 0.5).add_bucket(1.0, None, 1.5)
        reordered = Bucketizer().add_bucket(1.0, None, 1.5).add_bucket(0.0, 1.0, 0.5)

        assert a == b
        assert a != reordered
        assert Bucketizer() == Bucketizer()

    def test_from_buckets_matches_chained_calls(self, reference_bucketizer):
        built = Bucketizer.from_buckets(
            [(10.0, 20.0, 15.0), (5.0, 10.0, 7.5), (None, 4.0, 0.0)]
        )

        assert built == reference_bucketizer

    def test_repr_lists_buckets(self):
        text = repr(Bucketizer().add_bucket(None, 4.0, 0.0))

        assert "Bucket(lower=None, upper=4.0, output=0.0)" in text


def test_classify_is_repeatable(reference_bucketizer):
    first = [reference_bucketizer.classify(v) for v in (12.34, 999.99, 7.5, 3.9, 4.0)]
    second = [reference_bucketizer.classify(v) for v in (12.34, 999.99, 7.5, 3.9, 4.0)]

    assert first == second
    assert len(reference_bucketizer) == 3


def test_concurrent_classification(reference_bucketizer):
    values = [i * 0.25 for i in range(-40, 120)]
    expected = [reference_bucketizer.classify(v) for v in values]
    results: list[list] = []

    def worker():
        results.append([reference_bucketizer.classify(v) for v in values])

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 8
    assert all(r == expected for r in results)


def test_bucket_flags():
    assert Bucket(None, None, 1.0).is_catch_all
    assert not Bucket(0.0, None, 1.0).is_catch_all
    assert Bucket(2.0, 1.0, 1.0).is_inert
    assert Bucket(1.0, 1.0, 1.0).is_inert
    assert not Bucket(None, 1.0, 1.0).is_inert
    assert not Bucket(0.0, 1.0, 1.0).is_inert
