"""Exception types raised by the recall pipeline."""


class DietRecallError(Exception):
    """Base class for recall pipeline errors."""


class InvalidRecordError(DietRecallError, ValueError):
    """An intake record is structurally unusable."""


class UnsupportedFormatError(DietRecallError):
    """A recall file has an extension the loader cannot read."""


class RecallFormatError(DietRecallError):
    """A recall file does not follow the expected export layout."""


class NoRecallFilesError(DietRecallError):
    """A batch folder contains no recall files."""
