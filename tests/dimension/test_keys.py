"""Unit tests for key normalization."""

import numpy as np
import pytest

from crossdim.dimension.keys import display_name, normalize_key


def test_normalize_key_format():
    assert normalize_key("A") == "str:'A'"
    assert normalize_key(1) == "int:1"
    assert normalize_key(None) == "NoneType:None"


@pytest.mark.parametrize("a,b", [(1, "1"), (1, 1.0), (1, True), ("None", None)])
def test_normalize_key_distinguishes_types(a, b):
    """Values with equal str() but different types get different keys."""
    assert str(a) == str(b) or a == b
    assert normalize_key(a) != normalize_key(b)


def test_normalize_key_is_deterministic():
    assert normalize_key((1, "a")) == normalize_key((1, "a"))


def test_display_name():
    assert display_name(1) == "1"
    assert display_name("A") == "A"


def test_normalize_key_unwraps_numpy_scalars():
    assert normalize_key(np.int64(1)) == normalize_key(1)
    assert normalize_key(np.float64(2.5)) == normalize_key(2.5)
    assert normalize_key(np.str_("A")) == normalize_key("A")
    assert display_name(np.int64(3)) == "3"
