"""Domain models for a single submission and its terminal outcome.

A `PendingRequest` is created by the caller and handed read-only to the
dispatcher. Each request resolves to exactly one `CompletionResult`.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Union

from .common import DocumentLabel, Payload


class SubmissionState(str, Enum):
    """Lifecycle of a request inside the dispatcher."""
    PENDING = "pending"
    IN_FLIGHT = "in_flight"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    TRANSPORT_FAILURE = "transport_failure"
    SERIALIZATION_FAILED = "serialization_failed"


@dataclass(frozen=True)
class PendingRequest:
    """A caller-submitted unit of work awaiting dispatch."""
    payload: Payload
    label: DocumentLabel
    submitted_at: float = field(default_factory=time.monotonic)


# --- Terminal Outcomes ---

@dataclass(frozen=True)
class Accepted:
    """The remote endpoint returned the success status."""
    label: DocumentLabel
    status_code: int = 200
    response_body: str = ""
    latency_ms: Optional[float] = None
    state = SubmissionState.ACCEPTED


@dataclass(frozen=True)
class Rejected:
    """The remote endpoint answered with any other status."""
    label: DocumentLabel
    status_code: int
    response_body: str = ""
    latency_ms: Optional[float] = None
    state = SubmissionState.REJECTED


@dataclass(frozen=True)
class TransportFailure:
    """The call failed before a response was received."""
    label: DocumentLabel
    cause: BaseException
    latency_ms: Optional[float] = None
    state = SubmissionState.TRANSPORT_FAILURE


@dataclass(frozen=True)
class SerializationFailed:
    """The document could not be encoded; nothing was sent."""
    label: DocumentLabel
    cause: BaseException
    state = SubmissionState.SERIALIZATION_FAILED


CompletionResult = Union[Accepted, Rejected, TransportFailure, SerializationFailed]

# Caller-supplied handler invoked exactly once with the terminal outcome
CompletionSink = Callable[[CompletionResult], None]