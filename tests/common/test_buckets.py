"""
Unit tests for the category -> bucket classifier.
"""

import pytest

from shsat_toolkit.common.buckets import (
    ALGEBRA_KEYWORDS,
    BUCKET_PRIORITY,
    Bucket,
    bucket_of,
    count_by_bucket,
)


class TestBucketOf:
    """Tests for bucket_of()."""

    @pytest.mark.parametrize("category", [
        "Algebra",
        "Ratios & Rates",
        "Percents",
        "Proportional Reasoning",
        "Order of Operations",
        "Simplifying Expressions",
        "Linear Equations",
        "Inequalities",
        "Number Line",
        "Absolute Value",
    ])
    def test_bucket_of_when_algebra_keyword_then_algebra(self, category):
        """Any algebra keyword substring classifies as ALGEBRA."""
        assert bucket_of(category) is Bucket.ALGEBRA

    @pytest.mark.parametrize("category", ["Geometry", "Volume of Cylinders", "Surface Area"])
    def test_bucket_of_when_geometry_keyword_then_geometry(self, category):
        assert bucket_of(category) is Bucket.GEOMETRY

    @pytest.mark.parametrize("category", [
        "Statistics",
        "MMMR",
        "Probability",
        "Combinations",
    ])
    def test_bucket_of_when_stats_keyword_then_statsprob(self, category):
        assert bucket_of(category) is Bucket.STATSPROB

    @pytest.mark.parametrize("category", [None, "", "Number Theory", "Logic"])
    def test_bucket_of_when_no_keyword_then_other(self, category):
        """Missing or unmatched categories fall back to OTHER."""
        assert bucket_of(category) is Bucket.OTHER

    def test_bucket_of_when_mixed_case_then_case_insensitive(self):
        assert bucket_of("GEOMETRY") is Bucket.GEOMETRY
        assert bucket_of("pRoBaBiLiTy") is Bucket.STATSPROB

    def test_bucket_of_when_two_buckets_match_then_algebra_wins(self):
        """Algebra is checked first, so 'Rates of Volume' is algebra."""
        # "rate" (algebra) and "volume" (geometry) both match
        assert bucket_of("Rates of Volume Change") is Bucket.ALGEBRA

    def test_bucket_of_when_substring_inside_word_then_matches(self):
        """Matching is by substring, so 'accelerate' contains 'rate'."""
        assert bucket_of("Accelerate") is Bucket.ALGEBRA

    def test_bucket_of_when_question_then_uses_category(self, make_question):
        # Arrange
        q = make_question("q1", category="Probability")

        # Act & Assert
        assert bucket_of(q) is Bucket.STATSPROB

    def test_bucket_of_when_called_twice_then_same_result(self, make_question):
        """Classifier is pure."""
        q = make_question("q1", category="Surface Area")
        assert bucket_of(q) is bucket_of(q)


class TestCountByBucket:
    """Tests for count_by_bucket()."""

    def test_count_by_bucket_when_empty_then_all_zero(self):
        assert count_by_bucket([]) == {b: 0 for b in Bucket}

    def test_count_by_bucket_when_mixed_then_tallies(self, make_pool):
        # Arrange
        pool = make_pool([("Algebra", False, 3), ("Geometry", True, 2), (None, False, 1)])

        # Act
        counts = count_by_bucket(pool)

        # Assert
        assert counts[Bucket.ALGEBRA] == 3
        assert counts[Bucket.GEOMETRY] == 2
        assert counts[Bucket.STATSPROB] == 0
        assert counts[Bucket.OTHER] == 1


class TestConstants:

    def test_priority_order_is_algebra_geometry_statsprob(self):
        assert BUCKET_PRIORITY == (Bucket.ALGEBRA, Bucket.GEOMETRY, Bucket.STATSPROB)

    def test_algebra_keywords_include_ratio_words(self):
        assert {"ratio", "rate", "percent", "proportion"} <= set(ALGEBRA_KEYWORDS)

    def test_bucket_values_are_wire_names(self):
        assert [b.value for b in Bucket] == ["algebra", "geometry", "statsprob", "other"]
