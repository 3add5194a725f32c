"""Exceptions raised by the reconciliation engine."""


class ReportError(Exception):
    """Base class for report failures."""


class StoreUnavailableError(ReportError):
    """The backing data store could not be read. Fatal for the whole report."""
