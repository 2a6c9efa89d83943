"""
Application settings and configuration management.
"""

import os
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional, Union
import yaml
from dotenv import load_dotenv

from tb_analysis.data.models import ThresholdConfig
from tb_analysis.utils.calculations import is_finite_number

load_dotenv()


class Settings:
    """Application settings and configuration."""

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        self.project_root = Path(__file__).resolve().parents[3]
        self.config_dir = Path(config_dir) if config_dir else self.project_root / "config"
        self.data_dir = self.project_root / "data"
        self.output_dir = self.data_dir / "output"
        self.logger = logging.getLogger(__name__)

        self.thresholds = {}
        self.column_keywords = {}

        self._load_config()
        self._validate_config()

    def _load_config(self):
        """Load configuration from YAML files with error handling."""
        self.thresholds = self._load_yaml_config(
            self.config_dir / "thresholds.yaml",
            self._default_thresholds,
            "thresholds"
        )
        self._apply_env_overrides()

        self.column_keywords = self._load_yaml_config(
            self.config_dir / "column_mapping.yaml",
            self._default_column_keywords,
            "column mapping"
        )

    def _load_yaml_config(self, file_path: Path, default_func, config_name: str) -> Dict[str, Any]:
        """Load a YAML config file with fallback to defaults."""
        try:
            if file_path.exists():
                with open(file_path, 'r', encoding='utf-8') as f:
                    config = yaml.safe_load(f)
                    if config is None:
                        self.logger.warning(f"Empty {config_name} file, using defaults")
                        return default_func()
                    self.logger.info(f"Loaded {config_name} from {file_path}")
                    return config
            else:
                self.logger.warning(f"{config_name} file not found at {file_path}, using defaults")
                return default_func()
        except yaml.YAMLError as e:
            self.logger.error(f"Error parsing {config_name} YAML: {e}, using defaults")
            return default_func()
        except OSError as e:
            self.logger.error(f"Error loading {config_name}: {e}, using defaults")
            return default_func()

    def _apply_env_overrides(self):
        """Environment variables win over the thresholds file."""
        for env_name, key in [("MATERIALITY_THRESHOLD", "materiality_threshold"),
                              ("SIGNIFICANT_THRESHOLD", "significant_threshold")]:
            raw = os.getenv(env_name)
            if raw is None or raw.strip() == "":
                continue
            try:
                self.thresholds[key] = float(raw)
                self.logger.info(f"{key} overridden from {env_name}: {raw}")
            except ValueError:
                raise ValueError(f"{env_name} must be numeric, got {raw!r}")

    def _validate_config(self):
        """Validate loaded configuration."""
        try:
            self._validate_thresholds()
            self._validate_column_keywords()
            self.logger.info("Configuration validation completed successfully")
        except ValueError as e:
            self.logger.error(f"Configuration validation failed: {e}")
            raise

    def _validate_thresholds(self):
        """Validate thresholds configuration."""
        required_keys = ['materiality_threshold', 'significant_threshold']
        for key in required_keys:
            if key not in self.thresholds:
                raise ValueError(f"Missing required threshold key: {key}")

            if not is_finite_number(self.thresholds[key]):
                raise ValueError(f"Threshold {key} must be a finite number")

        if self.thresholds['significant_threshold'] < self.thresholds['materiality_threshold']:
            self.logger.warning(
                "significant_threshold is below materiality_threshold; "
                "accounts between the two will be flagged significant"
            )

    def _validate_column_keywords(self):
        """Validate column mapping keywords."""
        required_fields = ['account_code', 'account_description',
                           'current_year_balance', 'prior_year_balance']
        for field_name in required_fields:
            keywords = self.column_keywords.get(field_name)
            if not isinstance(keywords, list) or not keywords:
                raise ValueError(f"Column keywords for {field_name} must be a non-empty list")

    def _default_thresholds(self) -> Dict[str, Any]:
        """Default variance thresholds."""
        return {
            "materiality_threshold": 10.0,
            "significant_threshold": 25.0,
            "large_balance_limit": 1e12,
        }

    def _default_column_keywords(self) -> Dict[str, List[str]]:
        """Default header keywords used to auto-detect the upload columns."""
        return {
            "account_code": ["code", "number", "id"],
            "account_description": ["desc", "name"],
            "current_year_balance": ["current", "this year"],
            "prior_year_balance": ["prior", "previous", "last year"],
        }

    @property
    def default_output_file(self) -> str:
        """Default output file path."""
        return str(self.output_dir / "trial_balance_analysis.xlsx")

    @property
    def log_level(self) -> str:
        """Logging level."""
        return os.getenv("LOG_LEVEL", "INFO")

    @property
    def large_balance_limit(self) -> float:
        """Absolute balance above which a value is treated as a likely data error."""
        return float(self.thresholds.get("large_balance_limit", 1e12))

    def get_threshold_config(self) -> ThresholdConfig:
        """Build the threshold pair used for classification."""
        return ThresholdConfig(
            materiality_threshold=float(self.thresholds["materiality_threshold"]),
            significant_threshold=float(self.thresholds["significant_threshold"]),
        )

    def get_column_keywords(self, field_name: str) -> List[str]:
        """Get header keywords for one trial balance field."""
        return [str(k).lower() for k in self.column_keywords.get(field_name, [])]
