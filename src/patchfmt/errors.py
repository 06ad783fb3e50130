"""patchfmt exception hierarchy.

Keep this module small and dependency-free: it is imported by every layer,
including the pure rendering core, and by tests.
"""


class PatchfmtError(Exception):
    """Base exception for all patchfmt errors."""


class InvalidArgument(PatchfmtError):
    """Raised for a malformed formatting flag value (e.g. `--unified=abc`)."""


class InvalidInput(PatchfmtError):
    """Raised when a diff record violates the record data model."""


class PatchfmtConfigError(PatchfmtError):
    """Raised for invalid `patchfmt.toml` contents."""
