"""Unit tests for document filters."""

import pytest

from kwik.components.filters import ExactMatch, Predicate, as_filter, matches, strict_equal


def test_exact_match_all_fields_equal():
    doc = {"name": "Ann", "age": 30, "city": "Oslo"}

    assert matches(ExactMatch({"name": "Ann"}), doc)
    assert matches(ExactMatch({"name": "Ann", "age": 30}), doc)


def test_exact_match_mismatch_excludes():
    doc = {"name": "Ann", "age": 30}

    assert not matches(ExactMatch({"name": "Bob"}), doc)
    assert not matches(ExactMatch({"name": "Ann", "age": 31}), doc)


def test_exact_match_missing_key_excludes():
    """Test that a missing field never matches, even against None."""
    doc = {"name": "Ann"}

    assert not matches(ExactMatch({"age": 30}), doc)
    assert not matches(ExactMatch({"age": None}), doc)
    assert matches(ExactMatch({"age": None}), {"age": None})


def test_exact_match_does_not_conflate_bool_and_int():
    assert not matches(ExactMatch({"flag": 1}), {"flag": True})
    assert not matches(ExactMatch({"flag": True}), {"flag": 1})
    assert matches(ExactMatch({"flag": True}), {"flag": True})
    assert matches(ExactMatch({"n": 1}), {"n": 1.0})


def test_exact_match_empty_matches_everything():
    assert matches(ExactMatch({}), {"a": 1})
    assert matches(ExactMatch(), "not a mapping")


def test_exact_match_non_mapping_document():
    assert not matches(ExactMatch({"a": 1}), [("a", 1)])
    assert not matches(ExactMatch({"a": 1}), None)


def test_predicate_is_sole_arbiter():
    is_adult = Predicate(lambda doc: doc["age"] >= 18)

    assert matches(is_adult, {"age": 30})
    assert not matches(is_adult, {"age": 12})


def test_predicate_truthiness():
    assert matches(Predicate(lambda doc: doc), {"a": 1})
    assert not matches(Predicate(lambda doc: doc), {})


def test_predicate_errors_propagate():
    """Test that matches() leaves error handling to the caller."""
    with pytest.raises(KeyError):
        matches(Predicate(lambda doc: doc["missing"]), {})


def test_as_filter_normalizes_mapping_and_callable():
    flt = as_filter({"a": 1})
    assert isinstance(flt, ExactMatch)
    assert flt.fields == {"a": 1}

    fn = lambda doc: True  # noqa: E731
    flt = as_filter(fn)
    assert isinstance(flt, Predicate)
    assert flt.fn is fn


def test_as_filter_passes_filters_through():
    exact = ExactMatch({"a": 1})
    predicate = Predicate(bool)

    assert as_filter(exact) is exact
    assert as_filter(predicate) is predicate


def test_as_filter_rejects_other_types():
    with pytest.raises(TypeError):
        as_filter(42)


def test_strict_equal():
    assert strict_equal("a", "a")
    assert strict_equal([1, 2], [1, 2])
    assert strict_equal(False, False)
    assert not strict_equal(0, False)
    assert not strict_equal("1", 1)
