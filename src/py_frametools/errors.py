class FrameToolsError(Exception):
    """Base exception for py-frametools."""
    pass


class FrameToolsKeyError(FrameToolsError, KeyError):
    """Raised when a column/key is missing."""
    pass


class FrameToolsTypeError(FrameToolsError, TypeError):
    """Raised for invalid types in API calls."""
    pass


class FrameToolsValueError(FrameToolsError, ValueError):
    """Raised for invalid values or conflicting names."""
    pass


class ColumnNotFoundError(FrameToolsKeyError):
    """Raised when a named column does not exist in a DataFrame."""
    pass


class SchemaError(FrameToolsTypeError):
    """Raised when a record type declares a field that is not a plain scalar."""
    pass


class DuplicateColumnError(FrameToolsValueError):
    """Raised when a column name would appear twice in one DataFrame."""
    pass
