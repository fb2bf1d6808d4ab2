"""Month risk lookup built from user month settings"""

from datetime import date
from typing import Iterable, Optional

from invoice_scheduler.models.invoice import MonthSetting
from invoice_scheduler.models.schedule import MonthRisk, ValidationIssue
from invoice_scheduler.validation.validator import MonthSettingValidator

NO_RISK = MonthRisk()


class MonthRiskIndex:
    """
    (year, month) -> MonthRisk lookup.

    Built once per scheduling run in a single pass over the settings.
    Months without a setting, and months whose setting failed validation,
    have no risk flags. When two settings share a month the first wins.
    """

    def __init__(
        self,
        risks: dict[tuple[int, int], MonthRisk],
        issues: Optional[list[ValidationIssue]] = None,
    ):
        self._risks = risks
        self.issues: list[ValidationIssue] = issues or []

    @classmethod
    def build(
        cls,
        month_settings: Iterable[MonthSetting],
        validator: Optional[MonthSettingValidator] = None,
    ) -> "MonthRiskIndex":
        validator = validator or MonthSettingValidator()
        accepted, issues = validator.screen(month_settings)

        risks = {
            setting.key: MonthRisk(critical=setting.critical, low_income=setting.low_income)
            for setting in accepted
        }
        return cls(risks, issues)

    def lookup(self, year: int, month: int) -> MonthRisk:
        return self._risks.get((year, month), NO_RISK)

    def for_date(self, day: date) -> MonthRisk:
        return self.lookup(day.year, day.month)

    def __len__(self) -> int:
        return len(self._risks)
