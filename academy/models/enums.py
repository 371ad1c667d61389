import enum

from sqlalchemy import Enum as SAEnum


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    AWAITING_VERIFICATION = "awaiting_verification"
    APPROVED = "approved"
    REJECTED = "rejected"


class PaymentType(str, enum.Enum):
    COURSE = "course"
    CERTIFICATE = "certificate"


class VideoType(str, enum.Enum):
    YOUTUBE = "youtube"
    VIMEO = "vimeo"
    URL = "url"


class CertificateRequestStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    SENT = "sent"


def _enum_column_type(enum_cls: type[enum.Enum], name: str) -> SAEnum:
    # Persist the lowercase values (the wire format), not the member names
    return SAEnum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )


# SQLAlchemy Enum instances (reuse across models to avoid duplicate type creation)
payment_status_enum = _enum_column_type(PaymentStatus, "payment_status")
payment_type_enum = _enum_column_type(PaymentType, "payment_type")
video_type_enum = _enum_column_type(VideoType, "video_type")
certificate_request_status_enum = _enum_column_type(
    CertificateRequestStatus, "certificate_request_status"
)
