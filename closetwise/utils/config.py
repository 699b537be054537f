"""Configuration management system using Pydantic v2 and YAML.

This module provides type-safe loading of the analytics policy constants
(projection horizon, challenge size, similarity weights, trend windows)
and the ledger backend selection for ClosetWise.
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from closetwise.utils.exceptions import ConfigFileNotFoundError, ConfigValidationError


CHALLENGE_TYPES = ["neglected_items", "color_exploration", "style_mixing"]


class ValuationConfig(BaseModel):
    """Policy for cost-per-wear valuation."""
    
    horizon_days: int = Field(default=365, ge=1, description="Projection horizon counted from purchase")


class ChallengeConfig(BaseModel):
    """Policy for rediscovery challenges."""
    
    total_items: int = Field(default=5, ge=1, description="Target items per challenge")
    duration_days: int = Field(default=14, ge=1, description="Days until a challenge expires")
    max_update_attempts: int = Field(default=3, ge=1, description="Attempts for a progress compare-and-swap")
    default_type: str = Field(default="neglected_items", description="Challenge type used when none is requested")
    neglected_after_days: int = Field(default=60, ge=1, description="Days without wear after which an item counts as neglected when picking a type automatically")
    
    @field_validator('default_type')
    @classmethod
    def validate_default_type(cls, v: str) -> str:
        """Validate default challenge type."""
        valid_types = CHALLENGE_TYPES + ["auto"]
        v_lower = v.lower()
        if v_lower not in valid_types:
            raise ValueError(f"Invalid challenge type. Choose from: {valid_types}")
        return v_lower


class MatchWeights(BaseModel):
    """Weights for combining the closet similarity factors."""
    
    color: float = Field(default=0.5, ge=0.0, le=1.0, description="Weight of requested colour overlap")
    style: float = Field(default=0.3, ge=0.0, le=1.0, description="Weight of requested style keyword overlap")
    underuse: float = Field(default=0.2, ge=0.0, le=1.0, description="Weight of the rarely-worn bonus")
    
    @model_validator(mode='after')
    def validate_weights_sum(self) -> 'MatchWeights':
        """Ensure match weights sum to 1.0."""
        total = self.color + self.style + self.underuse
        if not abs(total - 1.0) < 1e-3:
            raise ValueError(f"Match weights must sum to 1.0, got {total}")
        return self


class MatchingConfig(BaseModel):
    """Policy for shop-your-closet similarity matching."""
    
    weights: MatchWeights = Field(default_factory=MatchWeights)
    neutral_color_score: float = Field(default=0.5, ge=0.0, le=1.0, description="Colour score when no colours are requested")
    neutral_style_score: float = Field(default=0.5, ge=0.0, le=1.0, description="Style score when no style is requested")
    min_score: float = Field(default=0.3, ge=0.0, le=1.0, description="Minimum combined score for a match")
    max_results: int = Field(default=6, ge=1, description="Maximum number of owned items returned")
    materiality_threshold: float = Field(default=0.5, ge=0.0, le=1.0, description="Component score needed to explain a factor")


class TrendConfig(BaseModel):
    """Policy for monthly confidence trends."""
    
    top_n: int = Field(default=5, ge=1, description="Items listed as most and least confident")
    baseline_months: int = Field(default=3, ge=1, description="Trailing months averaged into the baseline")


class LedgerConfig(BaseModel):
    """Configuration for the wardrobe ledger adapter."""
    
    backend: str = Field(default="memory", description="Ledger backend: memory or sqlite")
    database_path: str = Field(default="./data/closetwise.db", description="SQLite database file")
    
    @field_validator('backend')
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Validate ledger backend."""
        valid_backends = ["memory", "sqlite"]
        v_lower = v.lower()
        if v_lower not in valid_backends:
            raise ValueError(f"Invalid ledger backend. Choose from: {valid_backends}")
        return v_lower


class AppConfig(BaseModel):
    """Root configuration model containing all sub-configurations."""
    
    valuation: ValuationConfig = Field(default_factory=ValuationConfig)
    challenges: ChallengeConfig = Field(default_factory=ChallengeConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    trends: TrendConfig = Field(default_factory=TrendConfig)
    ledger: LedgerConfig = Field(default_factory=LedgerConfig)
    log_level: str = Field(default="INFO", description="Logging level")
    
    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level. Choose from: {valid_levels}")
        return v_upper


# Singleton pattern for configuration
_config: Optional[AppConfig] = None


def load_config(config_path: Optional[Path | str] = None) -> AppConfig:
    """Load and validate configuration from YAML file.
    
    Args:
        config_path: Path to configuration file. Defaults to config/config.yaml
                    relative to project root, or CLOSETWISE_CONFIG env var
        
    Returns:
        Validated AppConfig instance
        
    Raises:
        ConfigFileNotFoundError: If config file doesn't exist
        ConfigValidationError: If the file does not hold a mapping
        pydantic.ValidationError: If configuration values are invalid
    """
    if config_path is None:
        # Try environment variable first
        env_config_path = os.environ.get('CLOSETWISE_CONFIG')
        if env_config_path:
            config_path = Path(env_config_path)
        else:
            # Default to config/config.yaml in project root
            project_root = Path(__file__).parent.parent.parent
            config_path = project_root / "config" / "config.yaml"
    else:
        config_path = Path(config_path)
    
    if not config_path.exists():
        example_path = config_path.parent / "config.example.yaml"
        raise ConfigFileNotFoundError(
            f"Configuration file not found: {config_path}. "
            f"Copy {example_path} to {config_path} or set CLOSETWISE_CONFIG.",
            path=str(config_path),
        )
    
    with open(config_path, 'r', encoding='utf-8') as f:
        config_dict = yaml.safe_load(f)
    
    if config_dict is None:
        config_dict = {}
    if not isinstance(config_dict, dict):
        raise ConfigValidationError(
            "Configuration root must be a mapping",
            value=type(config_dict).__name__,
        )
    
    return AppConfig.model_validate(config_dict)


def get_config(config_path: Optional[Path | str] = None, reload: bool = False) -> AppConfig:
    """Get configuration instance (singleton pattern).
    
    Args:
        config_path: Path to configuration file (only used on first call or if reload=True)
        reload: Force reload of configuration
        
    Returns:
        Cached or newly loaded AppConfig instance
    """
    global _config
    
    if _config is None or reload:
        _config = load_config(config_path)
    
    return _config


def reset_config() -> None:
    """Reset cached configuration (useful for testing)."""
    global _config
    _config = None
