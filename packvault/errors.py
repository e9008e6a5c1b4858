"""Exception types raised by the pack engine.

Every error subclasses both PackVaultError and the closest builtin, so callers
that only know about FileNotFoundError / ValueError / OSError keep working.
"""


class PackVaultError(Exception):
    """Base class for all pack engine errors."""


class ManifestNotFoundError(PackVaultError, FileNotFoundError):
    """manifest.json is missing from a pack directory or archive."""


class ManifestParseError(PackVaultError, ValueError):
    """manifest.json exists but cannot be decoded."""


class InvalidArchiveError(PackVaultError, ValueError):
    """A file could not be opened as a zip archive."""


class UnsafeArchiveEntryError(PackVaultError, ValueError):
    """An archive entry would be written outside the extraction target."""

    def __init__(self, entry_name: str, target_dir):
        self.entry_name = entry_name
        self.target_dir = target_dir
        super().__init__(f"Blocked archive path traversal: {entry_name!r} escapes {target_dir}")


class PackWriteError(PackVaultError, OSError):
    """Writing a pack into the archive store failed."""


class PackInstallError(PackVaultError, OSError):
    """Extracting or merging a pack into an installation directory failed."""


class DeclarationNotFoundError(PackVaultError, FileNotFoundError):
    """A world's active-addon declaration file does not exist."""


class DeclarationParseError(PackVaultError, ValueError):
    """A world's active-addon declaration file is malformed."""


class WorldPropertiesError(PackVaultError, ValueError):
    """The world properties file has no usable level-name."""
