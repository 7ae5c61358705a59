"""Domain layer errors.

Every error carries a stable ``code`` so callers can branch on it without
parsing messages. Validation and state-machine errors are expected outcomes
of user actions; only ``ConcurrentModificationError`` is worth retrying.
"""


class DomainError(Exception):
    """Base domain error."""

    code = "domain_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(DomainError):
    """Domain validation error."""

    code = "validation_error"


class RoundLimitExceededError(ValidationError):
    """Raised when a proposal would push a thread past its round limit."""

    code = "round_limit_exceeded"

    def __init__(self, max_rounds: int):
        self.max_rounds = max_rounds
        super().__init__(
            f"Round limit of {max_rounds} exceeded - "
            "negotiation closed without agreement"
        )


class InvalidRatingError(ValidationError):
    """Raised when a rating is outside the 1-5 range."""

    code = "invalid_rating"

    def __init__(self, rating: int):
        self.rating = rating
        super().__init__(f"Rating must be between 1 and 5, got {rating}")


class NotAuthorizedError(DomainError):
    """Raised when the actor is not a legitimate party to the operation."""

    code = "not_authorized"

    def __init__(self, resource: str, resource_id: str, user_id: str, action: str):
        self.resource = resource
        self.resource_id = resource_id
        self.user_id = user_id
        super().__init__(
            f"User {user_id} is not authorized to {action} {resource} {resource_id}"
        )


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    code = "not_found"

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class InvalidStateError(DomainError):
    """Raised when an operation is attempted outside its valid transition."""

    code = "invalid_state"


class RequestNotPendingError(InvalidStateError):
    """Raised when a match request is no longer the open proposal."""

    code = "request_not_pending"

    def __init__(self, request_id: str, detail: str = "is not pending"):
        self.request_id = request_id
        super().__init__(f"Match request {request_id} {detail}")


class ThreadClosedError(InvalidStateError):
    """Raised when a negotiation thread no longer accepts requests."""

    code = "thread_closed"

    def __init__(self, thread_id: str, status: str):
        self.thread_id = thread_id
        self.status = status
        super().__init__(f"Negotiation thread {thread_id} is closed ({status})")


class ProposalAlreadyOpenError(InvalidStateError):
    """Raised when a user already has an open proposal in the thread."""

    code = "proposal_already_open"

    def __init__(self, thread_id: str, request_id: str):
        self.thread_id = thread_id
        self.request_id = request_id
        super().__init__(
            f"An open proposal {request_id} already exists in thread {thread_id}"
        )


class MatchNotActiveError(InvalidStateError):
    """Raised when a match is no longer in the accepted state."""

    code = "match_not_active"

    def __init__(self, match_id: str, status: str):
        self.match_id = match_id
        self.status = status
        super().__init__(f"Match {match_id} is not active ({status})")


class MatchAlreadyCompletedError(InvalidStateError):
    """Raised when recording progress on an already completed match."""

    code = "match_already_completed"

    def __init__(self, match_id: str):
        self.match_id = match_id
        super().__init__(f"Match {match_id} is already completed")


class ConcurrentModificationError(DomainError):
    """Raised when an optimistic concurrency check fails.

    The operation can be retried: it re-reads current state.
    """

    code = "concurrent_modification"

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(
            f"{resource} {identifier} was modified concurrently, please retry"
        )
