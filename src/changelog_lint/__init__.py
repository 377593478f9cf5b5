"""changelog_lint: validate and parse Keep-a-Changelog style CHANGELOG.md files."""

__all__ = [
    "__version__",
    "parse_changelog",
    "load_changelog",
    "check_file",
    "check_text",
    "find_release",
    "release_notes",
    "insertion_point",
    # Model
    "Changelog",
    "Release",
    "ReleaseMeta",
    "Section",
    "SectionName",
    "Item",
    "Offset",
    # Errors
    "ChangelogError",
    "ConfigError",
    "VersionError",
]
__version__ = "0.1.0"

from changelog_lint.api import (  # noqa: E402, F401
    check_file,
    check_text,
    find_release,
    insertion_point,
    release_notes,
)
from changelog_lint.core.changelog import load_changelog, parse_changelog  # noqa: E402, F401
from changelog_lint.core.errors import ChangelogError, ConfigError  # noqa: E402, F401
from changelog_lint.core.version import VersionError  # noqa: E402, F401
from changelog_lint.model import (  # noqa: E402, F401
    Changelog,
    Item,
    Offset,
    Release,
    ReleaseMeta,
    Section,
    SectionName,
)
