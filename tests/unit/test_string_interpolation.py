import pytest
from podlet.UTILS.string_interpolation import EnvironmentInterpolator
from podlet.errors import ComposeError


class TestEnvironmentInterpolator:
    """Tests for EnvironmentInterpolator."""

    @pytest.mark.parametrize("template,expected", [
        ("$NAME", "web"),
        ("${NAME}-1", "web-1"),
        ("${MISSING:-fallback}", "fallback"),
        ("${EMPTY:-fallback}", "fallback"),
        ("${EMPTY-fallback}", ""),
        ("${MISSING-fallback}", "fallback"),
        ("${NAME:+set}", "set"),
        ("${EMPTY:+set}", ""),
        ("${EMPTY+set}", "set"),
        ("${MISSING+set}", ""),
        ("$$NAME", "$NAME"),
        ("cost: 5$", "cost: 5$"),
        ("no variables", "no variables"),
    ])
    def test_interpolate(self, template, expected):
        """Test the supported placeholder forms."""
        context = {"NAME": "web", "EMPTY": ""}
        assert EnvironmentInterpolator.interpolate(template, context) == expected

    def test_unset_variable_is_blank(self, caplog):
        """Test an unset plain variable becomes an empty string with a warning."""
        assert EnvironmentInterpolator.interpolate("a${MISSING}b", {}) == "ab"
        assert "MISSING" in caplog.text

    def test_required_variable(self):
        """Test ${VAR?message} fails with the given message when unset."""
        with pytest.raises(ComposeError, match="token is required"):
            EnvironmentInterpolator.interpolate("${TOKEN?token is required}", {})

    def test_required_non_empty_variable(self):
        """Test ${VAR:?} also fails on an empty value."""
        assert EnvironmentInterpolator.interpolate("${TOKEN?}", {"TOKEN": ""}) == ""
        with pytest.raises(ComposeError):
            EnvironmentInterpolator.interpolate("${TOKEN:?}", {"TOKEN": ""})

    def test_interpolate_data(self):
        """Test values of nested structures are interpolated, keys are not."""
        data = {"$KEY": ["$NAME", {"port": 80, "host": "${HOST:-localhost}"}], "flag": True}
        result = EnvironmentInterpolator.interpolate_data(data, {"NAME": "web"})
        assert result == {"$KEY": ["web", {"port": 80, "host": "localhost"}], "flag": True}
