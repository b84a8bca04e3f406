# qa_engine/common/errors.py

"""Operational errors that cross layer boundaries.

Faults inside individual checks never show up here: they are converted into
failed results where they happen. These exceptions cover the few situations
where a caller has to react (re-authenticate, tell the user an export failed).
"""


class QaEngineError(Exception):
    """Base class for engine errors."""


class AuthenticationRequiredError(QaEngineError):
    """No usable session token when a run is about to start."""

    def __init__(self, message: str = "Authentication required: no session token"):
        super().__init__(message)


class ExportError(QaEngineError):
    """A report could not be serialized or written."""


class ManifestError(QaEngineError):
    """A page manifest or build manifest could not be loaded."""
