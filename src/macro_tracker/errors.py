"""Error types raised by the macro tracker."""


class MacroTrackerError(Exception):
    """Base class for macro tracker errors."""


class ValidationError(MacroTrackerError):
    """Caller input was rejected before any write happened."""


class EntryNotFoundError(MacroTrackerError):
    """Raised at the tool boundary when an entry id does not exist."""


class ExtractionError(MacroTrackerError):
    """The extraction model returned unusable output."""


class StoreError(MacroTrackerError):
    """Base class for storage failures."""


class StoreIOError(StoreError, OSError):
    """Storage location could not be created or opened."""


class SchemaError(StoreError):
    """Existing database does not match the expected schema."""


class StoreClosedError(StoreError):
    """Operation attempted on a closed store."""
