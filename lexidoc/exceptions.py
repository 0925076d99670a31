"""
Exception classes for LexiDoc.

All LexiDoc exceptions inherit from LexiDocError,
making it easy to catch all library errors.

Example:
    >>> try:
    ...     result = lexidoc.aggregate(pages)
    ... except lexidoc.AggregationError as e:
    ...     print(f"Bad input on page {e.page_number}: {e}")
    ... except lexidoc.LexiDocError as e:
    ...     print(f"LexiDoc error: {e}")
"""


class LexiDocError(Exception):
    """
    Base exception for all LexiDoc errors.

    Catch this to handle any LexiDoc-specific error.
    """

    pass


class AggregationError(LexiDocError):
    """
    Raised when the page input violates the caller contract.

    Malformed regions are tolerated; only structurally invalid pages
    (a page that is not a list of regions) raise. The whole call fails,
    no partial result is returned.

    Example:
        >>> lexidoc.aggregate([[{"text": "ok"}], "not a page"])
        AggregationError: Page 2 is not a list of regions (got str)
    """

    def __init__(self, message: str, page_index: int | None = None):
        super().__init__(message)
        self.page_index = page_index

    @property
    def page_number(self) -> int | None:
        """1-based page number of the offending page, if any."""
        return None if self.page_index is None else self.page_index + 1


class AggregationCancelledError(AggregationError):
    """Raised when a cancel event is set while a document is being aggregated."""

    pass


class RuleTableError(LexiDocError):
    """
    Raised when a correction rule table cannot be loaded.

    This covers unreadable files, malformed YAML, missing sections and
    patterns that do not compile. It is a defect in the table, so it is
    raised at load time rather than while correcting text.
    """

    pass


class ConfigurationError(LexiDocError, ValueError):
    """
    Raised for invalid configuration.

    Example:
        >>> AggregationConfig(mixed_language_ratio=1.5)
        ConfigurationError: mixed_language_ratio must be between 0.0 and 1.0, got 1.5
    """

    pass
