"""
Test suite for page cursor normalisation
Following TDD approach with AAA pattern and descriptive naming
"""

import pytest
from satellite_adapter.page_cursor import normalize_page_cursor, UnsupportedCursorType


class TestNormalizePageCursor:
    """Test suite for folding int, float and string page fields into integers"""

    @pytest.mark.parametrize("value", [3, 3.0, "3"])
    def test_normalize_page_cursor_with_equivalent_shapes_returns_same_integer(self, value):
        """
        Test that int, float and numeric string cursors are interchangeable
        """
        # Act
        result = normalize_page_cursor(value)

        # Assert
        assert result == 3
        assert isinstance(result, int)

    def test_normalize_page_cursor_with_fractional_float_truncates(self):
        """
        Test that floats are truncated towards zero
        """
        # Act & Assert
        assert normalize_page_cursor(2.9) == 2

    def test_normalize_page_cursor_with_signed_string_parses_sign(self):
        """
        Test that signed decimal strings are accepted
        """
        # Act & Assert
        assert normalize_page_cursor("+4") == 4
        assert normalize_page_cursor("-1") == -1

    @pytest.mark.parametrize("value", ["abc", "", "1.5", "2 ", "0x10"])
    def test_normalize_page_cursor_with_non_numeric_string_returns_zero(self, value):
        """
        Test that strings which are not base-10 integers normalise to 0
        """
        # Act & Assert
        assert normalize_page_cursor(value) == 0

    @pytest.mark.parametrize("value, type_name", [
        (True, "bool"),
        (None, "NoneType"),
        ([1], "list"),
        ({"page": 1}, "dict"),
    ])
    def test_normalize_page_cursor_with_unsupported_type_raises(self, value, type_name):
        """
        Test that other shapes raise UnsupportedCursorType naming the type
        """
        # Act & Assert
        with pytest.raises(UnsupportedCursorType) as exc_info:
            normalize_page_cursor(value)

        assert exc_info.value.value_type == type_name
        assert f"unexpected type in pagination API result: {type_name}" in str(exc_info.value)

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_normalize_page_cursor_with_non_finite_float_raises(self, value):
        """
        Test that NaN and infinities cannot be used as page numbers
        """
        # Act & Assert
        with pytest.raises(UnsupportedCursorType):
            normalize_page_cursor(value)
