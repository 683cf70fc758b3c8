"""Exceptions raised across the trustlens pipeline."""


class TrustLensError(Exception):
    """Base exception for trustlens errors."""


class NotFoundError(TrustLensError):
    """Raised when an actor, review or authentication record does not exist."""

    def __init__(self, kind: str, identifier: str):
        super().__init__(f"{kind} not found: {identifier}")
        self.kind = kind
        self.identifier = identifier


class ValidationError(TrustLensError, ValueError):
    """Raised when caller-supplied input is malformed or out of range."""


class DuplicateVoteError(ValidationError):
    """Raised when a voter submits a second vote on the same review."""

    def __init__(self, review_id: str, voter_id: str):
        super().__init__(f"Voter {voter_id} has already voted on review {review_id}")
        self.review_id = review_id
        self.voter_id = voter_id


class ExternalServiceUnavailable(TrustLensError):
    """Raised inside the external classifier client; never escapes to callers."""

    def __init__(self, message: str, reason: str = "http_error"):
        super().__init__(message)
        self.reason = reason
