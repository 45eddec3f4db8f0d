"""
Unit tests for the configuration loader.
"""
import json
import os
import tempfile

import pytest

from inkcore.config import InkwellConfig, load_config


class TestLoadConfig:
    """Tests for load_config."""

    @pytest.fixture
    def tmpdir(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            yield tmpdir

    def write(self, directory, name, data):
        path = os.path.join(directory, name)
        with open(path, "w") as f:
            json.dump(data, f)
        return path

    def test_defaults_when_no_file(self, tmpdir):
        """Missing files should fall back to the defaults."""
        config = load_config([os.path.join(tmpdir, "missing.json")])
        assert config == InkwellConfig()
        assert config.escape is True
        assert config.encoding == "utf-8"

    def test_first_existing_file_wins(self, tmpdir):
        first = self.write(tmpdir, "first.json", {"basedir": "templates"})
        second = self.write(tmpdir, "second.json", {"basedir": "other", "escape": False})
        config = load_config([os.path.join(tmpdir, "missing.json"), first, second])
        assert config.basedir == "templates"
        assert config.escape is True

    def test_invalid_values(self, tmpdir):
        """Values of the wrong type should raise ValueError naming the file."""
        path = self.write(tmpdir, "bad.json", {"escape": "sometimes"})
        with pytest.raises(ValueError) as exc_info:
            load_config([path])
        assert "bad.json" in str(exc_info.value)

    def test_malformed_json(self, tmpdir):
        path = os.path.join(tmpdir, "broken.json")
        with open(path, "w") as f:
            f.write("{broken")
        with pytest.raises(ValueError) as exc_info:
            load_config([path])
        assert "broken.json" in str(exc_info.value)

    def test_non_object(self, tmpdir):
        path = self.write(tmpdir, "list.json", [1, 2])
        with pytest.raises(ValueError):
            load_config([path])
