from __future__ import annotations


class DatasetError(Exception):
    """Base class for errors that abort a dataset load."""


class ResourceLoadError(DatasetError):
    """The CSV resource could not be retrieved."""


class ParseError(DatasetError):
    """The CSV text is malformed."""


class EmptyDatasetError(DatasetError):
    """The CSV resource holds no data rows."""


class InvalidDataError(DatasetError):
    """A record holds a value the dashboard cannot use (e.g. non-numeric popularity)."""


class ExportError(Exception):
    """The visible rows could not be serialized."""
