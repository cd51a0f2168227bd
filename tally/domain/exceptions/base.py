class DomainException(Exception):
    """Base class for all errors raised by the calculation domain."""

    pass
