"""Fixed catalog vocabulary: subjects, days, periods, grades and price plans."""

from __future__ import annotations

from dataclasses import dataclass

from app.core.enums import (
    ContactCategoryEnum,
    CourseTypeEnum,
    EnrollmentStatusEnum,
    PaymentMethodEnum,
    PaymentStatusEnum,
)

SUBJECTS: tuple[str, ...] = ("英語", "数学", "国語", "理科", "社会")

WEEKDAYS: tuple[str, ...] = ("月", "火", "水", "木", "金")
SATURDAY = "土"
ALL_DAYS: tuple[str, ...] = (*WEEKDAYS, SATURDAY)

# Course rows may store English day codes.
DAY_ALIASES: dict[str, str] = {
    "mon": "月",
    "tue": "火",
    "wed": "水",
    "thu": "木",
    "fri": "金",
    "sat": "土",
}


@dataclass(frozen=True, slots=True)
class Period:
    number: int
    start: str
    end: str

    @property
    def label(self) -> str:
        return f"{self.number}限"

    @property
    def time_range(self) -> str:
        return f"{self.start}〜{self.end}"


WEEKDAY_PERIODS: tuple[Period, ...] = (
    Period(1, "15:30", "16:50"),
    Period(2, "17:00", "18:20"),
    Period(3, "18:30", "19:50"),
)

SATURDAY_PERIODS: tuple[Period, ...] = (
    Period(1, "13:10", "14:30"),
    Period(2, "14:40", "16:00"),
    Period(3, "16:10", "17:30"),
    Period(4, "17:40", "19:00"),
)


def periods_for_day(day: str) -> tuple[Period, ...]:
    """Return the period table for a day of week."""
    return SATURDAY_PERIODS if day == SATURDAY else WEEKDAY_PERIODS


SENIOR_GRADES: tuple[str, ...] = ("高3", "高2", "高1")
JUNIOR_GRADES: tuple[str, ...] = ("中3", "中2", "中1")

GRADE_CATEGORY_SLUGS: dict[str, tuple[str, ...]] = {
    "高1": ("general", "recommendation"),
    "高2": ("general", "recommendation", "ryugata"),
    "高3": ("general", "recommendation"),
    "中1": ("junior",),
    "中2": ("junior",),
    "中3": ("junior",),
}

CATEGORY_LABELS: dict[str, str] = {
    "general": "一般",
    "recommendation": "推薦",
    "ryugata": "留型",
    "junior": "中学",
}

# Number of companion names each individual format requires.
FORMAT_COMPANIONS: dict[CourseTypeEnum, int] = {
    CourseTypeEnum.INDIVIDUAL_1ON1: 0,
    CourseTypeEnum.INDIVIDUAL_1ON2: 1,
    CourseTypeEnum.INDIVIDUAL_1ON3: 2,
}

COURSE_TYPE_LABELS: dict[CourseTypeEnum, str] = {
    CourseTypeEnum.GROUP: "集団授業",
    CourseTypeEnum.INDIVIDUAL_1ON1: "個別指導（1対1）",
    CourseTypeEnum.INDIVIDUAL_1ON2: "個別指導（1対2）",
    CourseTypeEnum.INDIVIDUAL_1ON3: "個別指導（1対3）",
}

PAYMENT_METHOD_LABELS: dict[PaymentMethodEnum, str] = {
    PaymentMethodEnum.BANK_TRANSFER: "銀行振込",
    PaymentMethodEnum.ACCOUNT_TRANSFER_LUMP: "口座振替（一括）",
    PaymentMethodEnum.ACCOUNT_TRANSFER_INSTALLMENT: "口座振替（分割）",
}

PAYMENT_STATUS_LABELS: dict[PaymentStatusEnum, str] = {
    PaymentStatusEnum.UNPAID: "未払い",
    PaymentStatusEnum.PARTIAL: "一部入金",
    PaymentStatusEnum.PAID: "支払い済み",
    PaymentStatusEnum.REFUNDED: "返金済み",
}

ENROLLMENT_STATUS_LABELS: dict[EnrollmentStatusEnum, str] = {
    EnrollmentStatusEnum.PENDING: "申込中",
    EnrollmentStatusEnum.CONFIRMED: "確定",
    EnrollmentStatusEnum.CANCELLED: "キャンセル",
    EnrollmentStatusEnum.COMPLETED: "完了",
}

CONTACT_CATEGORY_LABELS: dict[ContactCategoryEnum, str] = {
    ContactCategoryEnum.COURSE: "講座について",
    ContactCategoryEnum.TUITION: "授業料について",
    ContactCategoryEnum.ENROLLMENT: "申し込みについて",
    ContactCategoryEnum.SCHEDULE: "時間割について",
    ContactCategoryEnum.OTHER: "その他",
}


@dataclass(frozen=True, slots=True)
class PricePlan:
    key: str
    label: str
    price: int
    unit: str
    description: str


GROUP_PRICE_PLAN = PricePlan(
    key="group",
    label="集団授業（1講座あたり）",
    price=11000,
    unit="月",
    description="1講座あたりの月額料金です。複数講座を受講される場合は、定額制プランをご利用いただけます。",
)

INDIVIDUAL_PRICE_PLANS: tuple[PricePlan, ...] = (
    PricePlan(
        key=CourseTypeEnum.INDIVIDUAL_1ON1.value,
        label="マンツーマン",
        price=24000,
        unit="月",
        description="講師1人に対して生徒1人。完全個別対応で最大限の効果を発揮します。",
    ),
    PricePlan(
        key=CourseTypeEnum.INDIVIDUAL_1ON2.value,
        label="セミ個別",
        price=19000,
        unit="月",
        description="講師1人に対して生徒2人。個別対応を保ちながら、コストを抑えた形式です。",
    ),
    PricePlan(
        key=CourseTypeEnum.INDIVIDUAL_1ON3.value,
        label="少人数個別",
        price=15000,
        unit="月",
        description="講師1人に対して生徒3人。個別指導の良さを残しつつ、お手頃な料金です。",
    ),
)
