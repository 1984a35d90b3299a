"""
Settings groups.

Settings are split into logical groups; each group can be used on its own
and is assembled from the flat Settings fields.
"""

import os

from pydantic import BaseModel, Field, field_validator


def _default_concurrency() -> int:
    return (os.cpu_count() or 1) * 2


class AnalysisConfig(BaseModel):
    """Symbol discovery and relationship collection settings."""

    excluded_assembly_prefixes: list[str] = Field(
        default_factory=lambda: ["System", "Microsoft"],
        description="Symbols declared in assemblies starting with these prefixes are skipped",
    )
    max_concurrency: int = Field(
        default_factory=_default_concurrency,
        ge=1,
        description="Upper bound on in-flight resolution service calls",
    )
    root_type_names: list[str] = Field(
        default_factory=lambda: ["object", "System.Object", "java.lang.Object"],
        description="Base types that terminate the inheritance depth walk",
    )


class BoundaryConfig(BaseModel):
    """Feature boundary detection settings."""

    merge_threshold: float = Field(default=0.7, ge=0.0, description="Coupling above which two groups merge")
    merge_separator: str = Field(default="_", description="Joins the tokens of merged groups")
    build_output_segments: list[str] = Field(
        default_factory=lambda: ["bin", "obj"],
        description="Path segments ignored when deriving a namespace from a file path",
    )
    source_file_suffixes: list[str] = Field(
        default_factory=lambda: [".cs", ".vb", ".fs", ".xaml", ".dll", ".exe"],
        description="Path segments ending with these suffixes are file names, not namespace parts",
    )

    @field_validator("build_output_segments", "source_file_suffixes")
    @classmethod
    def _lowercase(cls, values: list[str]) -> list[str]:
        return [v.lower() for v in values]


class ObservabilityConfig(BaseModel):
    """Logging settings."""

    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="console", description="console or json")
    batch_sample_size: int = Field(default=3, ge=0, description="Samples kept by BatchLogger summaries")
