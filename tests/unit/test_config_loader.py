import unittest
import os
import yaml
from unittest.mock import patch, mock_open

from pydantic import ValidationError

from certmatch.config_loader import load_config, EngineConfig, RecommendationConfig


class TestConfigLoader(unittest.TestCase):

    def setUp(self):
        self.sample_config = {
            "lenient": False,
            "result_valid_for_hours": 12,
            "catalog": {"catalog_file": None},
            "resolver": {"expiring_soon_days": 90},
            "scorer": {"default_minimum_match_score": 60},
            "recommendations": {"max_recommendations": 3, "deadline_bonus": 5},
            "batch": {"max_workers": 2}
        }
        self.config_yaml = yaml.dump(self.sample_config)

    def test_load_config_default(self):
        with patch("builtins.open", mock_open(read_data=self.config_yaml)):
            with patch("os.path.exists", return_value=True):
                config = load_config("dummy_path.yaml")
                self.assertIsInstance(config, EngineConfig)
                self.assertEqual(config.resolver.expiring_soon_days, 90)
                self.assertEqual(config.scorer.default_minimum_match_score, 60)
                self.assertEqual(config.recommendations.max_recommendations, 3)
                self.assertEqual(config.batch.max_workers, 2)
                self.assertEqual(config.result_valid_for_hours, 12)

    def test_env_var_override_lenient(self):
        with patch("builtins.open", mock_open(read_data=self.config_yaml)):
            with patch("os.path.exists", return_value=True):
                with patch.dict(os.environ, {"CERTMATCH_LENIENT": "true"}):
                    config = load_config("dummy_path.yaml")
                    self.assertTrue(config.lenient)

    def test_env_var_override_catalog_file(self):
        with patch("builtins.open", mock_open(read_data=self.config_yaml)):
            with patch("os.path.exists", return_value=True):
                with patch.dict(os.environ, {"CERTMATCH_CATALOG_FILE": "/etc/certmatch/catalog.yaml"}):
                    config = load_config("dummy_path.yaml")
                    self.assertEqual(config.catalog.catalog_file, "/etc/certmatch/catalog.yaml")

    def test_env_var_override_max_workers(self):
        minimal_config_yaml = yaml.dump({"lenient": True})
        with patch("builtins.open", mock_open(read_data=minimal_config_yaml)):
            with patch("os.path.exists", return_value=True):
                with patch.dict(os.environ, {"CERTMATCH_MAX_WORKERS": "8"}):
                    config = load_config("dummy_path.yaml")
                    self.assertEqual(config.batch.max_workers, 8)

    def test_config_defaults(self):
        # An empty file falls back to the pydantic defaults
        with patch("builtins.open", mock_open(read_data="")):
            with patch("os.path.exists", return_value=True):
                config = load_config("dummy")
                self.assertFalse(config.lenient)
                self.assertIsNone(config.catalog.catalog_file)
                self.assertEqual(config.resolver.expiring_soon_days, 180)
                self.assertEqual(config.scorer.default_minimum_match_score, 70)
                self.assertEqual(config.recommendations.max_recommendations, 10)
                self.assertEqual(config.recommendations.renewal_cost_factor, 0.7)

    def test_invalid_values_rejected(self):
        with self.assertRaises(ValidationError):
            EngineConfig(scorer={"default_minimum_match_score": 150})
        with self.assertRaises(ValidationError):
            RecommendationConfig(max_recommendations=-1)


if __name__ == "__main__":
    unittest.main()
