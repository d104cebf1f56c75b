class InvariantViolation(Exception):
    """Raised when computed page content breaks a structural rule."""
