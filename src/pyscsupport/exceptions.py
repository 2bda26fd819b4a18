class InvalidArgument(ValueError):
    """Fatal registration error. Raised before any store is modified."""


class ShapeWarning(UserWarning):
    """Malformed uncertainty array. The value is still stored as given."""


class LayoutNotice(UserWarning):
    """Support end point(s) located upstream of the start point(s)."""
