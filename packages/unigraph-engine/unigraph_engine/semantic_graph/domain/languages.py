"""File extension → language mapping."""

from pathlib import PurePath, PureWindowsPath

LANGUAGE_BY_EXTENSION: dict[str, str] = {
    ".cs": "C#",
    ".xaml": "XAML",
    ".axaml": "XAML",
    ".sql": "SQL",
    ".vb": "VB.NET",
    ".fs": "F#",
    ".razor": "Razor",
    ".java": "Java",
    ".kt": "Kotlin",
    ".py": "Python",
    ".ts": "TypeScript",
    ".js": "JavaScript",
}

UNKNOWN_LANGUAGE = "Unknown"


def file_extension(file_path: str) -> str:
    """Lower-cased last suffix; handles both separators."""
    path = PureWindowsPath(file_path) if "\\" in file_path else PurePath(file_path)
    return path.suffix.lower()


def language_from_path(file_path: str) -> str:
    return LANGUAGE_BY_EXTENSION.get(file_extension(file_path), UNKNOWN_LANGUAGE)
