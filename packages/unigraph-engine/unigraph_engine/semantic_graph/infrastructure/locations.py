"""Resolver spans → graph locations."""

from ..domain.models import SourceLocation
from ..ports import SourceSpan


def to_source_location(span: SourceSpan | None) -> SourceLocation | None:
    if span is None:
        return None
    return SourceLocation(
        file=span.file_path,
        start_line=span.line,
        start_column=span.column,
        end_line=span.end_line if span.end_line is not None else span.line,
        end_column=span.end_column if span.end_column is not None else span.column,
    )
