"""
Configuration Management

Centralized configuration management with YAML file support
and environment variable overrides.
"""

import os
from pathlib import Path
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field
import yaml
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


DEFAULT_KEY_TERM_PATTERN = r"\b[A-Z][a-z]+\b|\b\d+\b|\b[a-z]{4,}\b"


@dataclass
class ParsingConfig:
    """Answer sheet parsing configuration."""
    missing_answer_sentinel: str = "No answer provided"
    diagnostic_line_count: int = 10
    encoding: str = "utf-8"


@dataclass
class FeedbackBandsConfig:
    """Score thresholds that select a feedback template."""
    excellent: int = 90
    good: int = 75
    partial: int = 60
    needs_improvement: int = 40


@dataclass
class GradingConfig:
    """Heuristic grading configuration."""
    min_answer_length: int = 2
    noise_token_length: int = 2
    key_term_pattern: str = DEFAULT_KEY_TERM_PATTERN
    short_ratio: float = 0.3
    short_penalty: float = 0.8
    long_ratio: float = 3.0
    long_penalty: float = 0.9
    detail_hint_length: int = 10
    heuristic_confidence: float = 0.85
    external_confidence: float = 0.8
    error_confidence: float = 0.1
    treat_sentinel_as_empty: bool = True
    bands: FeedbackBandsConfig = field(default_factory=FeedbackBandsConfig)


@dataclass
class ScorerConfig:
    """External scoring service configuration."""
    enabled: bool = False
    base_url: str = "https://openrouter.ai/api/v1"
    model: str = "openai/gpt-4o-mini"
    timeout: float = 10.0
    max_retries: int = 2
    max_tokens: int = 150
    temperature: float = 0.3
    api_key_env: str = "PAPERSCORE_SCORER_API_KEY"


@dataclass
class ReportConfig:
    """Grading report configuration."""
    pass_threshold: int = 60
    excellent_threshold: int = 80
    review_confidence: float = 0.5


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    console_level: str = "WARNING"  # Separate level for console output
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str = "logs/paperscore.log"
    max_size: str = "10MB"
    backup_count: int = 5


@dataclass
class AppConfig:
    """Main application configuration."""
    name: str = "paperscore"
    version: str = "1.0.0"
    environment: str = "production"
    debug: bool = False

    parsing: ParsingConfig = field(default_factory=ParsingConfig)
    grading: GradingConfig = field(default_factory=GradingConfig)
    scorer: ScorerConfig = field(default_factory=ScorerConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, config_path: Path) -> "AppConfig":
        """Load configuration from YAML file."""
        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        return cls.from_dict(config_data)

    @classmethod
    def from_dict(cls, config_data: Dict[str, Any]) -> "AppConfig":
        """Build configuration from a plain dictionary."""
        config_data = dict(config_data)

        # Flatten the nested app section before env overrides so they win
        if 'app' in config_data:
            app_config = config_data.pop('app') or {}
            config_data.update(app_config)

        config_data = cls._apply_env_overrides(config_data)

        if 'parsing' in config_data and isinstance(config_data['parsing'], dict):
            config_data['parsing'] = ParsingConfig(**config_data['parsing'])

        if 'grading' in config_data and isinstance(config_data['grading'], dict):
            grading_data = dict(config_data['grading'])
            if 'bands' in grading_data and isinstance(grading_data['bands'], dict):
                grading_data['bands'] = FeedbackBandsConfig(**grading_data['bands'])
            config_data['grading'] = GradingConfig(**grading_data)

        if 'scorer' in config_data and isinstance(config_data['scorer'], dict):
            scorer_data = dict(config_data['scorer'])
            if 'timeout' in scorer_data:
                scorer_data['timeout'] = float(scorer_data['timeout'])
            if isinstance(scorer_data.get('enabled'), str):
                scorer_data['enabled'] = _parse_bool(scorer_data['enabled'])
            config_data['scorer'] = ScorerConfig(**scorer_data)

        if 'report' in config_data and isinstance(config_data['report'], dict):
            config_data['report'] = ReportConfig(**config_data['report'])

        if 'logging' in config_data and isinstance(config_data['logging'], dict):
            config_data['logging'] = LoggingConfig(**config_data['logging'])

        if isinstance(config_data.get('debug'), str):
            config_data['debug'] = _parse_bool(config_data['debug'])

        return cls(**config_data)

    @staticmethod
    def _apply_env_overrides(config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration."""
        env_mappings = {
            'PAPERSCORE_LOG_LEVEL': ['logging', 'level'],
            'PAPERSCORE_SCORER_URL': ['scorer', 'base_url'],
            'PAPERSCORE_SCORER_MODEL': ['scorer', 'model'],
            'PAPERSCORE_SCORER_TIMEOUT': ['scorer', 'timeout'],
            'PAPERSCORE_SCORER_ENABLED': ['scorer', 'enabled'],
            'PAPERSCORE_DEBUG': ['debug'],
            'PAPERSCORE_ENVIRONMENT': ['environment'],
        }

        for env_var, config_path in env_mappings.items():
            env_value = os.getenv(env_var)
            if env_value:
                current = config_data
                for key in config_path[:-1]:
                    current = current.setdefault(key, {})
                current[config_path[-1]] = env_value

        return config_data

    def get_scorer_api_key(self) -> Optional[str]:
        """Read the scorer API key from the environment."""
        return os.getenv(self.scorer.api_key_env)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def validate_config(config: AppConfig) -> List[str]:
    """
    Check configuration values for consistency.

    Args:
        config: Configuration to check

    Returns:
        List of problem descriptions (empty when valid)
    """
    problems = []
    grading = config.grading
    bands = grading.bands

    if not (100 >= bands.excellent >= bands.good >= bands.partial >= bands.needs_improvement >= 0):
        problems.append("grading.bands must be ordered excellent >= good >= partial >= needs_improvement within 0-100")
    if grading.short_ratio <= 0 or grading.long_ratio <= 0:
        problems.append("grading length ratios must be positive")
    if grading.short_ratio >= grading.long_ratio:
        problems.append("grading.short_ratio must be lower than grading.long_ratio")
    for name in ('short_penalty', 'long_penalty', 'heuristic_confidence',
                 'external_confidence', 'error_confidence'):
        value = getattr(grading, name)
        if not 0.0 <= value <= 1.0:
            problems.append(f"grading.{name} must be between 0 and 1")
    if grading.min_answer_length < 0 or grading.noise_token_length < 0:
        problems.append("grading length limits must not be negative")

    if not 0 < config.scorer.timeout <= 120:
        problems.append("scorer.timeout must be between 0 and 120 seconds")
    if config.scorer.max_retries < 0:
        problems.append("scorer.max_retries must not be negative")

    if config.report.pass_threshold > config.report.excellent_threshold:
        problems.append("report.pass_threshold must not exceed report.excellent_threshold")
    if config.parsing.diagnostic_line_count < 1:
        problems.append("parsing.diagnostic_line_count must be at least 1")

    return problems


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config(config_path: Optional[Path] = None) -> AppConfig:
    """Get the application configuration instance."""
    global _config

    if _config is None:
        if config_path is None:
            # Default configuration path
            config_path = Path("config/default.yaml")

        if config_path.exists():
            _config = AppConfig.from_yaml(config_path)
        else:
            # Defaults plus environment overrides if file doesn't exist
            _config = AppConfig.from_dict({})

    return _config


def set_config(config: AppConfig) -> None:
    """Set the global configuration instance (useful for testing)."""
    global _config
    _config = config


def reload_config(config_path: Optional[Path] = None) -> AppConfig:
    """Reload configuration from file."""
    global _config
    _config = None
    return get_config(config_path)
