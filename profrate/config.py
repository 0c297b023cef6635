"""Configuration management using Pydantic BaseSettings.

This module provides centralized configuration management with validation,
type safety, and sensible defaults for the instructor rating annotator.
Every field can be overridden by the upper-cased environment variable of the
same name or through a ``.env`` file.
"""
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Main configuration class combining all settings."""

    # Rating service (GraphQL search endpoint)
    rmp_graphql_url: str = Field("https://www.ratemyprofessors.com/graphql", description="GraphQL search endpoint")
    rmp_profile_base_url: str = Field("https://www.ratemyprofessors.com/professor", description="Base URL for profile links")
    rmp_timeout: int = Field(20, ge=1, le=120, description="Request timeout in seconds")
    rmp_auth_token: str = Field("", description="Optional Basic auth token for the search endpoint")

    # Institution
    school_name: str = Field("University of California Davis", description="Institution display name")
    school_legacy_id: int = Field(1073, ge=1, description="Institution identifier on the rating service")
    search_page_size: int = Field(25, ge=1, le=100, description="Candidates requested per search")

    # Scoring weights
    score_exact_last_name: float = Field(50.0, ge=0.0, description="Points for an exact surname match")
    score_partial_last_name: float = Field(35.0, ge=0.0, description="Points for a surname containment match")
    score_first_name: float = Field(20.0, ge=0.0, description="Bonus for an exact first name match")
    score_first_initial: float = Field(10.0, ge=0.0, description="Bonus for a first initial match")
    score_popularity_cap: float = Field(10.0, ge=0.0, description="Upper bound of the popularity bonus")
    score_popularity_scale: float = Field(5.0, ge=0.0, description="Multiplier applied to log10(numRatings + 1)")

    # Presentation
    fallback_search_url: str = Field("https://www.google.com/search", description="Search engine used when no match is found")

    # Logging Configuration
    log_level: str = Field("INFO", description="Logging level")
    log_format: str = Field("%(asctime)s - %(name)s - %(levelname)s - %(message)s", description="Log format")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"
    }

    @field_validator("log_level")
    @classmethod
    def validate_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'Invalid log level: {v}. Valid options: {valid_levels}')
        return v.upper()

    @field_validator("rmp_graphql_url", "rmp_profile_base_url", "fallback_search_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")

    def validate_configuration(self) -> List[str]:
        """Validate the complete configuration and return any issues."""
        issues = []

        for name in ("rmp_graphql_url", "rmp_profile_base_url", "fallback_search_url"):
            if not getattr(self, name).startswith(("http://", "https://")):
                issues.append(f"{name.upper()} must be an http(s) URL")

        if not self.school_name.strip():
            issues.append("SCHOOL_NAME is required")

        if self.score_exact_last_name < self.score_partial_last_name:
            issues.append("SCORE_EXACT_LAST_NAME is lower than SCORE_PARTIAL_LAST_NAME, partial surname matches will outrank exact ones")

        if self.score_popularity_cap >= self.score_partial_last_name:
            issues.append("SCORE_POPULARITY_CAP is large enough to dominate the surname signal")

        return issues

    def log_configuration(self) -> None:
        """Log the current configuration (sanitized)."""
        from profrate.utils.logger import log_info

        log_info("Configuration loaded",
                 graphql_url=self.rmp_graphql_url,
                 school_name=self.school_name,
                 school_legacy_id=self.school_legacy_id,
                 search_page_size=self.search_page_size,
                 auth_configured=bool(self.rmp_auth_token),
                 timeout=self.rmp_timeout,
                 log_level=self.log_level)


# Global configuration instance (lazy loading)
_config = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reload_config() -> Config:
    """Reload configuration from environment variables."""
    global _config
    _config = Config()
    return _config
