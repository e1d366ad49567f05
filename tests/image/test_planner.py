"""
Tests for image/planner.py - output size planning.
"""

import pytest

from saoripng.image.planner import plan_output_size


def test_both_directives_negative_is_no_target():
    assert plan_output_size(-1, -1, 100, 200) is None
    assert plan_output_size(-5, -300, 1, 1) is None


def test_zero_keeps_source_size():
    assert plan_output_size(0, 0, 100, 200) == (100, 200)


def test_exact_size():
    assert plan_output_size(200, 300, 100, 200) == (200, 300)


def test_width_follows_height():
    assert plan_output_size(-1, 100, 100, 200) == (50, 100)


def test_height_follows_width():
    assert plan_output_size(5, -1, 100, 200) == (5, 10)


def test_derived_axis_uses_zero_substituted_size():
    assert plan_output_size(0, -1, 100, 200) == (100, 200)
    assert plan_output_size(-1, 0, 100, 200) == (100, 200)


def test_mixed_zero_and_exact():
    assert plan_output_size(0, 50, 100, 200) == (100, 50)


def test_derived_size_is_truncated():
    # 3 * (10 / 7) = 4.28...
    assert plan_output_size(-1, 10, 3, 7) == (4, 10)


def test_derived_size_is_at_least_one():
    assert plan_output_size(-1, 1, 1, 1000) == (1, 1)
    assert plan_output_size(1, -1, 1000, 1) == (1, 1)


@pytest.mark.parametrize("width,height", [(0, 10), (10, 0), (-1, 10)])
def test_non_positive_source_raises(width, height):
    with pytest.raises(ValueError):
        plan_output_size(0, 0, width, height)
