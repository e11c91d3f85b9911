from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Status stored on an attendance record."""

    PRESENT = "present"
    ABSENT = "absent"
    SICK = "sick"
    VACATION = "vacation"
    HOLIDAY = "holiday"
    DEPARTED = "departed"


class PlannedDayStatus(str, Enum):
    """Status of a single-date override in a contract's monthly schedule."""

    PLANNED = "planned"
    ABSENT_PLANNED = "absent_planned"
    HOLIDAY_PLANNED = "holiday_planned"


class ChildDayState(str, Enum):
    """Derived per-child classification for one day."""

    PRESENT = "present"
    DEPARTED = "departed"
    ABSENT = "absent"
    NONE = "none"


class ContractType(str, Enum):
    CDI = "CDI"
    CDD = "CDD"


class ContractStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class Mood(str, Enum):
    HAPPY = "happy"
    CALM = "calm"
    SAD = "sad"
    UPSET = "upset"
    TIRED = "tired"


class MealQuality(str, Enum):
    WELL = "well"
    AVERAGE = "average"
    POORLY = "poorly"


class NapQuality(str, Enum):
    GOOD = "good"
    AVERAGE = "average"
    POOR = "poor"


class ReportView(str, Enum):
    """Reporting window used by the attendance report."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class AuthEvent(str, Enum):
    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"
