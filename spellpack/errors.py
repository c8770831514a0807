"""Fatal error types. Skipped lines and lookup misses never raise."""


class SpellpackError(Exception):
    """Base class for errors that abort a conversion run."""


class ConfigError(SpellpackError):
    """Configuration file missing or malformed."""


class SourceError(SpellpackError):
    """A data directory or file is missing, or a source file failed to parse."""


class DecodeError(SpellpackError):
    """An XML document does not have the expected shape."""
