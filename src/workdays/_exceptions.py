class CalendarError(ValueError):
    """Raised for invalid calendar configuration and unusable date input."""
