from functools import cached_property, lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from unigraph_shared.config.groups import (
    AnalysisConfig,
    BoundaryConfig,
    ObservabilityConfig,
    _default_concurrency,
)

# A missing .env is treated as "not provided"; process env vars still apply.
_ENV_FILE = ".env" if Path(".env").is_file() else None


class Settings(BaseSettings):
    """
    Unigraph Application Settings

    Environment variables use the UNIGRAPH_ prefix.
    Example: UNIGRAPH_MAX_CONCURRENCY=8, UNIGRAPH_LOG_FORMAT=json

    Grouped access:
        settings.analysis       # AnalysisConfig
        settings.boundaries     # BoundaryConfig
        settings.observability  # ObservabilityConfig
    """

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        env_prefix="UNIGRAPH_",
        extra="ignore",
    )

    # ========================================================================
    # Grouped Config Accessors
    # ========================================================================

    @cached_property
    def analysis(self) -> AnalysisConfig:
        """Discovery and collection settings group."""
        return AnalysisConfig(
            excluded_assembly_prefixes=self.excluded_assembly_prefixes,
            max_concurrency=self.max_concurrency,
            root_type_names=self.root_type_names,
        )

    @cached_property
    def boundaries(self) -> BoundaryConfig:
        """Feature boundary settings group."""
        return BoundaryConfig(
            merge_threshold=self.feature_merge_threshold,
            merge_separator=self.feature_merge_separator,
            build_output_segments=self.build_output_segments,
            source_file_suffixes=self.source_file_suffixes,
        )

    @cached_property
    def observability(self) -> ObservabilityConfig:
        """Logging settings group."""
        return ObservabilityConfig(
            log_level=self.log_level,
            log_format=self.log_format,
            batch_sample_size=self.batch_sample_size,
        )

    # ========================================================================
    # Analysis
    # ========================================================================

    excluded_assembly_prefixes: list[str] = ["System", "Microsoft"]
    max_concurrency: int = Field(default_factory=_default_concurrency, ge=1)
    root_type_names: list[str] = ["object", "System.Object", "java.lang.Object"]

    # ========================================================================
    # Feature boundaries
    # ========================================================================

    feature_merge_threshold: float = 0.7
    feature_merge_separator: str = "_"
    build_output_segments: list[str] = ["bin", "obj"]
    source_file_suffixes: list[str] = [".cs", ".vb", ".fs", ".xaml", ".dll", ".exe"]

    # ========================================================================
    # Observability
    # ========================================================================

    log_level: str = "INFO"
    log_format: str = "console"
    batch_sample_size: int = 3


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings read from the environment."""
    return Settings()
