"""Domain errors raised by the accounts services."""


class ConstraintViolation(Exception):
    """A domain bound was violated (e.g. a year outside 1..4).

    `message` is meant for end users; the raw store error is chained as
    `__cause__` when there is one.
    """

    def __init__(self, message: str, field: str = ''):
        super().__init__(message)
        self.message = message
        self.field = field


class PerItemProvisioningError(Exception):
    """One account in a batch could not be created."""

    def __init__(self, email: str, message: str):
        super().__init__(message)
        self.email = email
        self.message = message


class BatchEnvelopeError(Exception):
    """The uploaded batch could not be parsed at all."""
