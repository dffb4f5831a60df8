"""Core enums shared with the hosted database."""

from enum import StrEnum


class RoleEnum(StrEnum):
    """Profile roles."""

    STUDENT = "student"
    ADMIN = "admin"
    INSTRUCTOR = "instructor"
    TUTOR = "tutor"


class CourseStatusEnum(StrEnum):
    """Course publication status. Only OPEN courses are selectable."""

    DRAFT = "draft"
    OPEN = "open"
    CLOSED = "closed"


class CourseTypeEnum(StrEnum):
    """Course delivery format."""

    GROUP = "group"
    INDIVIDUAL_1ON1 = "individual_1on1"
    INDIVIDUAL_1ON2 = "individual_1on2"
    INDIVIDUAL_1ON3 = "individual_1on3"


class EnrollmentStatusEnum(StrEnum):
    """Enrollment lifecycle status."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class PaymentMethodEnum(StrEnum):
    """Accepted payment methods."""

    BANK_TRANSFER = "bank_transfer"
    ACCOUNT_TRANSFER_LUMP = "account_transfer_lump"
    ACCOUNT_TRANSFER_INSTALLMENT = "account_transfer_installment"


class PaymentStatusEnum(StrEnum):
    """Payment tracking status."""

    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"
    REFUNDED = "refunded"


class ContactCategoryEnum(StrEnum):
    """Contact form inquiry category."""

    COURSE = "course"
    TUITION = "tuition"
    ENROLLMENT = "enrollment"
    SCHEDULE = "schedule"
    OTHER = "other"


class ContactStatusEnum(StrEnum):
    """Contact submission handling status."""

    NEW = "new"
    READ = "read"
    REPLIED = "replied"


class NoteAudienceEnum(StrEnum):
    """Instructor note target audience."""

    STUDENT = "student"
    TUTOR = "tutor"
    BOTH = "both"
