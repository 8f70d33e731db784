"""Tests for attribute value coercion and formatting."""
import pytest

from oob_config.exceptions import (
    AttributeNotFound,
    AttributeValidationError,
    NotAnInteger,
    UnsupportedAttributeType,
)
from oob_config.registry import coerce_attributes, format_attribute_value


class TestCoerceAttributes:
    """Tests for string-to-typed coercion."""

    def test_integer_attribute_parsed(self, registry):
        result = coerce_attributes({"SNMP.1.AlertPort": "162"}, registry)
        assert result == {"SNMP.1.AlertPort": 162}
        assert isinstance(result["SNMP.1.AlertPort"], int)

    def test_text_attributes_pass_through(self, registry):
        raw = {
            "Users.2.UserName": "operator",
            "Users.2.Password": "s3cret!",
            "Time.1.Timezone": "UTC",
            "SNMP.1.AgentCommunity": "123",
        }
        assert coerce_attributes(raw, registry) == raw

    def test_signed_integer(self, registry):
        assert coerce_attributes({"SNMP.1.AlertPort": "-5"}, registry) == {"SNMP.1.AlertPort": -5}

    @pytest.mark.parametrize("text", ["abc", "16.0", "", " 162", "162\n", "162 ", "1_000", "0x10", "١٦٢"])
    def test_not_an_integer(self, registry, text):
        with pytest.raises(NotAnInteger) as exc_info:
            coerce_attributes({"SNMP.1.AlertPort": text}, registry)
        assert "SNMP.1.AlertPort" in str(exc_info.value)

    def test_unknown_attribute(self, registry):
        with pytest.raises(AttributeNotFound):
            coerce_attributes({"Nope.1.Nope": "1"}, registry)

    def test_unsupported_type(self, registry):
        with pytest.raises(UnsupportedAttributeType):
            coerce_attributes({"Redundancy.1.Policy": "true"}, registry)

    def test_bounds_checked_afterwards(self, registry):
        """Coercion does not check bounds; validate_all does."""
        coerced = coerce_attributes({"SNMP.1.AlertPort": "70000"}, registry)
        with pytest.raises(AttributeValidationError):
            registry.validate_all(coerced)


class TestFormatAttributeValue:
    """Tests for rendering device values as strings."""

    @pytest.mark.parametrize("value,expected", [
        (None, ""),
        ("Enabled", "Enabled"),
        (162, "162"),
        (162.0, "162"),
        (0.0, "0"),
    ])
    def test_format(self, value, expected):
        assert format_attribute_value(value) == expected
