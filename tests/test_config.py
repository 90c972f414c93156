"""Tests for config file management."""

from adsb_cpr import config
from adsb_cpr.config import load_config, save_config


class TestConfig:
    def test_default_config(self):
        cfg = load_config()
        assert cfg["cpr"]["max_pair_age"] == 10.0
        assert cfg["cpr"]["cache_max_age"] == 15.0
        assert cfg["logging"]["level"] == "WARNING"

    def test_save_and_load(self):
        cfg = load_config()
        cfg["cpr"]["max_pair_age"] = 5.0
        cfg["cpr"]["cache_max_age"] = 8
        cfg["logging"]["level"] = "DEBUG"

        path = save_config(cfg)
        assert path.exists()

        loaded = load_config()
        assert loaded["cpr"]["max_pair_age"] == 5.0
        assert loaded["cpr"]["cache_max_age"] == 8
        assert loaded["logging"]["level"] == "DEBUG"

    def test_partial_file_keeps_defaults(self):
        config.CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        config.CONFIG_FILE.write_text("# only one key\ncpr:\n  max_pair_age: 4\n")

        loaded = load_config()
        assert loaded["cpr"]["max_pair_age"] == 4
        assert loaded["cpr"]["cache_max_age"] == 15.0
        assert loaded["logging"]["level"] == "WARNING"

    def test_null_values_roundtrip(self):
        cfg = load_config()
        cfg["cpr"]["note"] = None
        save_config(cfg)
        assert load_config()["cpr"]["note"] is None

    def test_null_keeps_default(self):
        config.CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        config.CONFIG_FILE.write_text("cpr:\n  max_pair_age: null\nlogging:\n  level: ~\n")

        loaded = load_config()
        assert loaded["cpr"]["max_pair_age"] == 10.0
        assert loaded["logging"]["level"] == "WARNING"

    def test_scalar_in_place_of_section_ignored(self):
        config.CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        config.CONFIG_FILE.write_text("logging: DEBUG\ncpr: 5\n")

        loaded = load_config()
        assert loaded["logging"] == {"level": "WARNING"}
        assert loaded["cpr"]["max_pair_age"] == 10.0
        assert loaded["cpr"]["cache_max_age"] == 15.0

    def test_bool_values_roundtrip(self):
        cfg = load_config()
        cfg["cpr"]["strict"] = True
        save_config(cfg)
        assert load_config()["cpr"]["strict"] is True

    def test_top_level_value(self):
        cfg = load_config()
        cfg["station"] = "Franklin NC"
        save_config(cfg)
        assert load_config()["station"] == "Franklin NC"
