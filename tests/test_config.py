"""
Tests for SobolConfig and configuration files.
"""

import json

import numpy as np
import pytest

from sobol_qmc.config import SobolConfig, load_config
from sobol_qmc.errors import ConfigurationError
from sobol_qmc.rng.direction_numbers import default_table
from sobol_qmc.rng.sobol import SobolSequenceGenerator


class TestSobolConfig:
    """Test SobolConfig validation and builders."""

    def test_defaults(self):
        """Test default settings."""
        config = SobolConfig(dimension=3)
        assert config.bit_width == 30
        assert config.table_path is None
        assert config.skip == 0
        assert config.stride == 1
        assert config.offset == 0

    @pytest.mark.parametrize("kwargs,message", [
        ({"dimension": 0}, "dimension"),
        ({"dimension": 2, "skip": -1}, "skip"),
        ({"dimension": 2, "stride": 0}, "stride"),
        ({"dimension": 2, "stride": 4, "offset": 4}, "offset"),
        ({"dimension": 2, "offset": 1}, "offset"),
    ])
    def test_validation(self, kwargs, message):
        """Test that invalid settings raise ConfigurationError."""
        with pytest.raises(ConfigurationError, match=message):
            SobolConfig(**kwargs)

    @pytest.mark.parametrize("kwargs,message", [
        ({"dimension": "3"}, "dimension must be an integer"),
        ({"dimension": 2.0}, "dimension must be an integer"),
        ({"dimension": True}, "dimension must be an integer"),
        ({"dimension": 2, "skip": None}, "skip must be an integer"),
        ({"dimension": 2, "bit_width": "30"}, "bit_width must be an integer"),
        ({"dimension": 2, "table_path": 7}, "table_path"),
    ])
    def test_field_types(self, kwargs, message):
        """Test that values of the wrong type raise ConfigurationError."""
        with pytest.raises(ConfigurationError, match=message):
            SobolConfig(**kwargs)

    def test_from_dict_unknown_key(self):
        """Test that unknown keys are rejected."""
        with pytest.raises(ConfigurationError, match="unknown configuration keys"):
            SobolConfig.from_dict({"dimension": 2, "scramble": True})

    def test_from_dict_missing_dimension(self):
        """Test that the dimension is required."""
        with pytest.raises(ConfigurationError, match="dimension"):
            SobolConfig.from_dict({"skip": 3})

    def test_dict_round_trip(self):
        """Test to_dict / from_dict."""
        config = SobolConfig(dimension=4, skip=8, stride=2, offset=1)
        assert SobolConfig.from_dict(config.to_dict()) == config

    def test_build_generator_with_skip(self):
        """Test that the generator starts at point ``skip``."""
        generator = SobolConfig(dimension=5, skip=7).build_generator()
        reference = SobolSequenceGenerator(dimension=5)
        np.testing.assert_array_equal(generator.next(), reference.point_at(7))

    def test_build_generator_without_skip(self):
        """Test that skip=0 starts at the origin."""
        generator = SobolConfig(dimension=2).build_generator()
        np.testing.assert_array_equal(generator.next(), np.zeros(2))

    def test_build_generator_dimension_too_large(self):
        """Test that table size is checked when building."""
        with pytest.raises(ConfigurationError, match="exceeds"):
            SobolConfig(dimension=40).build_generator()

    def test_build_stream(self):
        """Test the leap-frog stream of a worker."""
        stream = SobolConfig(dimension=3, skip=1, stride=4, offset=2).build_stream()
        reference = SobolSequenceGenerator(dimension=3)
        points = stream.take(3)
        for k, i in enumerate([3, 7, 11]):
            np.testing.assert_array_equal(points[k], reference.point_at(i))

    def test_custom_table(self, tmp_path):
        """Test loading the direction table from a file."""
        path = tmp_path / "table.json"
        default_table().truncated(2).to_json(path)

        config = SobolConfig(dimension=2, table_path=str(path))
        assert len(config.load_table()) == 2
        with pytest.raises(ConfigurationError, match="exceeds"):
            SobolConfig(dimension=3, table_path=str(path)).build_generator()


class TestLoadConfig:
    """Test load_config."""

    def test_load(self, tmp_path):
        """Test reading a config file."""
        path = tmp_path / "sobol.json"
        path.write_text(json.dumps({"dimension": 6, "skip": 1}))

        config = load_config(path)
        assert config == SobolConfig(dimension=6, skip=1)

    def test_invalid_json(self, tmp_path):
        """Test that malformed files raise ConfigurationError."""
        path = tmp_path / "bad.json"
        path.write_text("[1, 2")
        with pytest.raises(ConfigurationError, match="invalid JSON"):
            load_config(path)

    def test_not_an_object(self, tmp_path):
        """Test that the top level must be an object."""
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigurationError, match="JSON object"):
            load_config(path)

    def test_wrong_field_type(self, tmp_path):
        """Test that a string dimension in the file raises ConfigurationError."""
        path = tmp_path / "sobol.json"
        path.write_text(json.dumps({"dimension": "3"}))
        with pytest.raises(ConfigurationError, match="dimension must be an integer"):
            load_config(path)

    def test_missing_file(self, tmp_path):
        """Test that an unreadable file raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="cannot read"):
            load_config(tmp_path / "missing.json")
