"""
Exception types raised by the translation pipeline.
"""


class SheetTranslatorError(Exception):
    """Base class for pipeline errors."""


class JobNotFoundError(SheetTranslatorError):
    """The job id has no row in the job store."""

    def __init__(self, job_id: str):
        super().__init__(f"Job {job_id} not found")
        self.job_id = job_id


class MissingDataRangeError(SheetTranslatorError):
    """The worksheet has no declared data range."""


class TranslationError(SheetTranslatorError):
    """A translation batch could not be turned into key/value pairs."""
