# Import all models so Alembic can discover them via Base.metadata
from .certificate_request import CertificateRequest
from .course import Course
from .course_video import CourseVideo
from .enrollment import Enrollment
from .free_mode import FreeModeSettings
from .journey import Journey
from .payment_order import PaymentOrder
from .rating import CourseRating
from .video_progress import VideoProgress

__all__ = [
    "CertificateRequest",
    "Course",
    "CourseRating",
    "CourseVideo",
    "Enrollment",
    "FreeModeSettings",
    "Journey",
    "PaymentOrder",
    "VideoProgress",
]
