"""Unit tests for configuration loading and validation."""

import pytest
import yaml

from closetwise.utils.config import (
    AppConfig,
    ChallengeConfig,
    LedgerConfig,
    MatchingConfig,
    MatchWeights,
    get_config,
    load_config,
    reset_config,
)
from closetwise.utils.exceptions import ConfigFileNotFoundError, ConfigValidationError


class TestMatchWeights:
    """Test match weight validation."""
    
    def test_valid_weights(self):
        """Test valid match weights sum to 1.0."""
        weights = MatchWeights(color=0.6, style=0.2, underuse=0.2)
        assert weights.color == 0.6
        assert weights.underuse == 0.2
    
    def test_weights_sum_validation(self):
        """Test match weights must sum to 1.0."""
        with pytest.raises(ValueError, match="sum to 1.0"):
            MatchWeights(color=0.5, style=0.5, underuse=0.5)
    
    def test_weights_range_validation(self):
        """Test weights must be in [0, 1] range."""
        with pytest.raises(ValueError):
            MatchWeights(color=1.5, style=-0.3, underuse=-0.2)
    
    def test_defaults(self):
        """Test default 0.5 / 0.3 / 0.2 split."""
        weights = MatchWeights()
        assert (weights.color, weights.style, weights.underuse) == (0.5, 0.3, 0.2)


class TestSectionConfigs:
    """Test policy sections."""
    
    def test_challenge_defaults(self):
        """Test default challenge policy."""
        config = ChallengeConfig()
        assert config.total_items == 5
        assert config.duration_days == 14
        assert config.max_update_attempts == 3
        assert config.default_type == "neglected_items"
    
    def test_challenge_type_normalised(self):
        """Test challenge type is lower-cased."""
        assert ChallengeConfig(default_type="AUTO").default_type == "auto"
    
    def test_invalid_challenge_type(self):
        """Test unknown default challenge type."""
        with pytest.raises(ValueError, match="Invalid challenge type"):
            ChallengeConfig(default_type="capsule")
    
    def test_positive_sizes(self):
        """Test sizes must be at least 1."""
        with pytest.raises(ValueError):
            ChallengeConfig(total_items=0)
    
    def test_ledger_backend(self):
        """Test backend names are validated."""
        assert LedgerConfig(backend="SQLite").backend == "sqlite"
        with pytest.raises(ValueError, match="Invalid ledger backend"):
            LedgerConfig(backend="postgres")
    
    def test_matching_defaults(self):
        """Test default matching thresholds."""
        config = MatchingConfig()
        assert config.min_score == 0.3
        assert config.max_results == 6
        assert config.neutral_color_score == 0.5


class TestAppConfig:
    """Test application configuration."""
    
    def test_load_from_yaml(self, tmp_path):
        """Test loading configuration from YAML file."""
        config_data = {
            "valuation": {"horizon_days": 180},
            "challenges": {"total_items": 3, "duration_days": 7},
            "matching": {
                "weights": {"color": 0.4, "style": 0.4, "underuse": 0.2},
                "min_score": 0.25,
            },
            "trends": {"top_n": 3},
            "ledger": {"backend": "sqlite", "database_path": "./test_data/ledger.db"},
            "log_level": "debug",
        }
        
        config_file = tmp_path / "test_config.yaml"
        with open(config_file, "w") as f:
            yaml.dump(config_data, f)
        
        config = load_config(config_file)
        
        assert config.valuation.horizon_days == 180
        assert config.challenges.total_items == 3
        assert config.matching.weights.style == 0.4
        assert config.matching.min_score == 0.25
        assert config.trends.top_n == 3
        assert config.trends.baseline_months == 3
        assert config.ledger.backend == "sqlite"
        assert config.log_level == "DEBUG"
    
    def test_invalid_weights_in_yaml(self, tmp_path):
        """Test validation errors surface from YAML values."""
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("matching:\n  weights:\n    color: 0.9\n    style: 0.9\n    underuse: 0.9\n")
        
        with pytest.raises(ValueError, match="sum to 1.0"):
            load_config(config_file)
    
    def test_invalid_yaml(self, tmp_path):
        """Test error handling for invalid YAML."""
        config_file = tmp_path / "invalid.yaml"
        config_file.write_text("invalid: yaml: content:")
        
        with pytest.raises(yaml.YAMLError):
            load_config(config_file)
    
    def test_empty_file_uses_defaults(self, tmp_path):
        """Test an empty file yields the default configuration."""
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        
        assert load_config(config_file) == AppConfig()
    
    def test_non_mapping_root(self, tmp_path):
        """Test a list at the root is rejected."""
        config_file = tmp_path / "list.yaml"
        config_file.write_text("- a\n- b\n")
        
        with pytest.raises(ConfigValidationError):
            load_config(config_file)
    
    def test_missing_file(self):
        """Test error handling for missing config file."""
        with pytest.raises(ConfigFileNotFoundError) as exc_info:
            load_config("/nonexistent/config.yaml")
        
        assert exc_info.value.code == "CONFIG_FILE_NOT_FOUND"
    
    def test_env_var_path(self, tmp_path, monkeypatch):
        """Test CLOSETWISE_CONFIG points at the file to load."""
        config_file = tmp_path / "env.yaml"
        config_file.write_text("valuation:\n  horizon_days: 90\n")
        monkeypatch.setenv("CLOSETWISE_CONFIG", str(config_file))
        
        assert load_config().valuation.horizon_days == 90
    
    def test_project_config(self, monkeypatch):
        """Test the shipped config/config.yaml is valid."""
        monkeypatch.delenv("CLOSETWISE_CONFIG", raising=False)
        
        config = load_config()
        
        assert config.challenges.total_items == 5
        assert config.matching.weights.color == 0.5


class TestConfigSingleton:
    """Test configuration singleton pattern."""
    
    @pytest.fixture(autouse=True)
    def fresh_config(self):
        """Clear the cached configuration around each test."""
        reset_config()
        yield
        reset_config()
    
    def test_config_caching(self, tmp_path):
        """Test configuration is cached when loaded from file."""
        config_file = tmp_path / "singleton_test.yaml"
        config_file.write_text("log_level: WARNING\n")
        
        config1 = get_config(config_file)
        config2 = get_config()
        
        assert config1 is config2
        assert config1.log_level == "WARNING"
    
    def test_reload(self, tmp_path):
        """Test reload re-reads the file."""
        config_file = tmp_path / "reload.yaml"
        config_file.write_text("log_level: WARNING\n")
        first = get_config(config_file)
        config_file.write_text("log_level: ERROR\n")
        
        second = get_config(config_file, reload=True)
        
        assert first is not second
        assert second.log_level == "ERROR"
