"""
Unit tests for rendering unit definitions.
"""
from podlet.CONVERTERS.to_quadlet import QuadletConverter, render_value, stringify


class TestQuadletConverter:
    """Tests for QuadletConverter."""

    def test_sections_and_keys(self):
        """Test sections are separated by a blank line and keep key order."""
        content = stringify({
            "Container": {"Image": "nginx", "ContainerName": "web"},
            "Service": {"Restart": "always"},
        })
        assert content == "[Container]\nImage=nginx\nContainerName=web\n\n[Service]\nRestart=always\n"

    def test_trailing_sections_order(self):
        """Test Service and Install always come after the resource section."""
        content = stringify({
            "Install": {"WantedBy": "default.target"},
            "Service": {"Restart": "always"},
            "Container": {"Image": "nginx"},
        })
        assert content.splitlines()[0] == "[Container]"
        assert content.index("[Service]") < content.index("[Install]")

    def test_repeated_keys(self):
        """Test list values are written one line per element, without deduplication."""
        content = stringify({"Container": {"PublishPort": ["80:80", "443:443", "80:80"]}})
        assert content == "[Container]\nPublishPort=80:80\nPublishPort=443:443\nPublishPort=80:80\n"

    def test_omits_empty_values(self):
        """Test empty values and empty sections are left out."""
        content = stringify({
            "Container": {"Image": "nginx", "Exec": "", "Mount": [], "Entrypoint": None},
            "Service": {},
            "Install": {"WantedBy": None},
        })
        assert content == "[Container]\nImage=nginx\n"

    def test_scalars(self):
        """Test booleans and numbers rendering."""
        assert render_value(True) == "true"
        assert render_value(False) == "false"
        assert render_value(3) == "3"
        content = stringify({"Container": {"ReadOnly": True, "HealthRetries": 3}})
        assert "ReadOnly=true\nHealthRetries=3\n" in content

    def test_false_is_written(self):
        """Test an explicit false value is not treated as empty."""
        assert stringify({"Container": {"ReadOnly": False}}) == "[Container]\nReadOnly=false\n"

    def test_values_are_not_escaped(self):
        """Test values are written verbatim."""
        content = stringify({"Container": {"Exec": "sh -c 'echo \"<hi>\" && exit 0'"}})
        assert "Exec=sh -c 'echo \"<hi>\" && exit 0'" in content

    def test_empty_unit(self):
        assert QuadletConverter({}).convert() == ""

    def test_sections(self):
        converter = QuadletConverter({"Image": {"Image": "nginx"}})
        assert converter.sections() == [("Image", [("Image", "nginx")])]
