"""Error taxonomy shared by every store and service.

Callers tell outcomes apart by exception type. ``StoreFailure`` is opaque:
the underlying driver error is chained for logs but never part of the message.
"""


class DomainError(Exception):
    """Base class for all expected, caller-recoverable outcomes."""


class NotFoundError(DomainError):
    def __init__(self, message: str = "the requested resource could not be found"):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """One or more field values violate declared constraints.

    ``messages`` maps field name to the list of every violation found for it.
    """

    def __init__(self, messages: dict[str, list[str]]):
        super().__init__(messages)
        self.messages = messages

    def __str__(self) -> str:
        return "; ".join(f"{field}: {', '.join(msgs)}" for field, msgs in self.messages.items())


class ConflictError(DomainError):
    def __init__(self, message: str = "unable to update the record due to an edit conflict, please try again"):
        super().__init__(message)
        self.message = message


class StoreFailure(Exception):
    """Any store error not classified above (connectivity, timeout, constraint)."""

    def __init__(self, message: str = "the server encountered a problem and could not process your request"):
        super().__init__(message)
        self.message = message
