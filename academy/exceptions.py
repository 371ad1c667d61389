"""Shared domain exception classes for the academy service.

These are raised by service-layer code and caught by controllers
to map to appropriate HTTP responses.
"""


class JourneyNotFoundError(Exception):
    def __init__(self, identifier: str = ""):
        self.identifier = identifier
        super().__init__(f"Journey not found: {identifier}")


class CourseNotFoundError(Exception):
    """Raised when a course cannot be found by ID or slug."""

    def __init__(self, identifier: str = ""):
        self.identifier = identifier
        super().__init__(f"Course not found: {identifier}")


class VideoNotFoundError(Exception):
    def __init__(self, video_id: str = ""):
        self.video_id = video_id
        super().__init__(f"Video not found: {video_id}")


class SlugAlreadyExistsError(Exception):
    def __init__(self, slug: str = ""):
        self.slug = slug
        super().__init__(f"Slug already in use: {slug}")


class InvalidVideoOrderError(Exception):
    """Raised when a reorder request does not list exactly the course's videos."""


class AlreadyEnrolledError(Exception):
    """Raised when user tries to enroll in a course they are already enrolled in."""


class NotEnrolledError(Exception):
    """Raised when an operation requires an enrollment that does not exist."""


class PaymentRequiredError(Exception):
    """Raised when paid content is accessed without an approved payment."""

    def __init__(self, price: object = None):
        self.price = price
        super().__init__("Payment required for this course.")


class WatchTimeNotReachedError(Exception):
    """Raised when a video is marked complete before the minimum watch time."""

    def __init__(self, required_secs: int = 0):
        self.required_secs = required_secs
        super().__init__(f"Watch at least {required_secs} seconds before completing this video.")


class PaymentNotRequiredError(Exception):
    """Raised when a payment claim is made for content that needs no payment."""


class PaymentAlreadyApprovedError(Exception):
    """Raised when a user already holds an approved order of the same type."""


class OrderAwaitingVerificationError(Exception):
    """Raised when a new claim is made while a previous one awaits verification."""


class OrderNotFoundError(Exception):
    def __init__(self, order_id: str = ""):
        self.order_id = order_id
        super().__init__(f"Payment order not found: {order_id}")


class InvalidStatusTransitionError(Exception):
    """Raised when an order or request status transition is not allowed."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot transition from {current} to {target}")


class InvalidFreeModeWindowError(Exception):
    """Raised when free mode is enabled with a missing or inverted window.

    The message is user-facing and is returned verbatim.
    """


class AlreadyRatedError(Exception):
    """Raised when a user rates a course a second time."""


class CourseNotCompletedError(Exception):
    """Raised when a certificate is requested before 100% progress."""


class CertificateRequestNotFoundError(Exception):
    def __init__(self, identifier: str = ""):
        self.identifier = identifier
        super().__init__(f"Certificate request not found: {identifier}")
