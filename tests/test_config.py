"""Tests for MeshConfig and its JSON persistence."""
import json
import os
import tempfile
import unittest

from rtin.config import MeshConfig, load_config, save_config


class TestMeshConfig(unittest.TestCase):
    """Test cases for MeshConfig."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_defaults(self):
        """Test the default configuration."""
        config = MeshConfig()
        self.assertEqual(config.max_error, 1.0)
        self.assertEqual(config.max_grid_size, 4097)
        self.assertEqual(config.output_format, "npz")

    def test_validation(self):
        """Test that invalid values are rejected."""
        with self.assertRaises(ValueError):
            MeshConfig(max_error=-1)
        with self.assertRaises(ValueError):
            MeshConfig(max_error=float("nan"))
        with self.assertRaises(ValueError):
            MeshConfig(max_grid_size=1)
        with self.assertRaises(ValueError):
            MeshConfig(output_format="obj")

    def test_zero_max_error_allowed(self):
        """Test that a zero threshold is valid."""
        self.assertEqual(MeshConfig(max_error=0).max_error, 0)

    def test_check_grid_size(self):
        """Test the grid size bound."""
        config = MeshConfig(max_grid_size=257)
        config.check_grid_size(257)
        with self.assertRaises(ValueError):
            config.check_grid_size(513)

    def test_dict_round_trip(self):
        """Test conversion to and from dictionaries, keeping unknown keys."""
        config = MeshConfig.from_dict({"max_error": 2.5, "output_format": "json", "label": "fuji"})
        self.assertEqual(config.max_error, 2.5)
        self.assertEqual(config.extra, {"label": "fuji"})

        as_dict = config.as_dict()
        self.assertEqual(as_dict["extra"], {"label": "fuji"})
        self.assertNotIn("extra", MeshConfig().as_dict())

    def test_save_and_load(self):
        """Test writing and reading a configuration file."""
        path = os.path.join(self.temp_dir.name, "config.json")
        save_config(MeshConfig(max_error=12.0, max_grid_size=513), path)

        with open(path) as f:
            self.assertEqual(json.load(f)["max_error"], 12.0)

        loaded = load_config(path)
        self.assertEqual(loaded.max_error, 12.0)
        self.assertEqual(loaded.max_grid_size, 513)

    def test_load_errors(self):
        """Test that unreadable or invalid files raise IOError."""
        with self.assertRaises(IOError):
            load_config(os.path.join(self.temp_dir.name, "missing.json"))

        path = os.path.join(self.temp_dir.name, "bad.json")
        with open(path, "w") as f:
            json.dump({"max_error": -3}, f)
        with self.assertRaises(IOError):
            load_config(path)


if __name__ == '__main__':
    unittest.main()
