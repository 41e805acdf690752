"""Tests for the touchgrass CLI."""

import json

from click.testing import CliRunner

from touchgrass.cli import cli


class TestCLI:
    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "touchgrass" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "1.0.0" in result.output

    def test_detect_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["detect", "--help"])
        assert result.exit_code == 0
        assert "--threshold" in result.output

    def test_detect_override(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["detect", "--override", "--", "40.0", "-75.0"])
        assert result.exit_code == 0
        assert "Outdoors" in result.output
        assert "100% confidence" in result.output

    def test_detect_override_json(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["detect", "--override", "--json", "40.0", "75.0"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["isOutdoors"] is True
        assert data["spaceCategory"] == "NATURAL_AREA"

    def test_grass_override(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["grass", "--override", "40.0", "75.0"])
        assert result.exit_code == 0
        assert "Touching grass" in result.output

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_MAPS_API_KEY", raising=False)
        monkeypatch.setattr("touchgrass.cli.load_dotenv", lambda: None)
        runner = CliRunner()
        result = runner.invoke(cli, ["detect", "40.0", "75.0"])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_latitude_out_of_range(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["detect", "--override", "95.0", "75.0"])
        assert result.exit_code != 0

    def test_radius_reaches_search_config(self, monkeypatch):
        import touchgrass.api
        from touchgrass.core.models import Explanations, OutdoorDetectionResult, SpaceCategory

        seen = {}

        def fake_detect(lat, lng, **kwargs):
            seen.update(kwargs)
            return OutdoorDetectionResult(
                is_outdoors=False,
                confidence=0,
                reasons=[],
                explanations=Explanations(),
                space_category=SpaceCategory.UNKNOWN,
            )

        monkeypatch.setattr(touchgrass.api, "detect", fake_detect)
        runner = CliRunner()
        result = runner.invoke(cli, ["detect", "--radius", "500", "40.0", "75.0"])

        assert result.exit_code == 0
        assert "Not outdoors" in result.output
        assert seen["config"].search.search_radius_m == 500

    def test_serve_uses_server_run(self, monkeypatch):
        import touchgrass.web.server

        seen = {}
        monkeypatch.setattr(touchgrass.web.server, "run", lambda **kw: seen.update(kw))
        runner = CliRunner()
        result = runner.invoke(cli, ["serve", "--port", "9000"])

        assert result.exit_code == 0
        assert seen == {"host": "127.0.0.1", "port": 9000}
