"""
Month Setting Validation

Month settings arrive from storage exactly as the user (or an older app
version) saved them. Before they influence priorities we check them.

Two kinds of checks:
1. Calendar checks: the (year, month) pair must name a real month.
   Failing this is an ERROR; the setting is ignored and that month is
   treated as having no special risk.
2. Consistency checks: duplicates and annual expenses dated outside the
   month. These are WARNINGS; the setting is still used.

DESIGN DECISION: Validation never raises. A bad setting must not stop
the rest of the schedule from being computed.
"""

from datetime import MAXYEAR, MINYEAR
from typing import Iterable

from invoice_scheduler.models.invoice import MonthSetting
from invoice_scheduler.models.schedule import ValidationIssue


class MonthSettingValidator:
    """Checks month settings before they are indexed."""

    def validate_calendar(self, setting: MonthSetting) -> list[ValidationIssue]:
        """
        Check that the setting names a real calendar month.

        Returns:
            Error-level issues. Empty if the setting is usable.
        """
        issues = []

        if not MINYEAR <= setting.year <= MAXYEAR:
            issues.append(ValidationIssue(
                field="year",
                issue_type="invalid_year",
                message=f"Month setting has an invalid year ({setting.year})",
                severity="error",
                suggested_fix=f"Use a year between {MINYEAR} and {MAXYEAR}",
            ))

        if not 1 <= setting.month <= 12:
            issues.append(ValidationIssue(
                field="month",
                issue_type="invalid_month",
                message=(
                    f"Month setting for {setting.year} has an invalid month "
                    f"({setting.month})"
                ),
                severity="error",
                suggested_fix="Use a month between 1 and 12",
            ))

        return issues

    def validate_consistency(self, setting: MonthSetting) -> list[ValidationIssue]:
        """Warnings for a setting that passed the calendar checks."""
        issues = []

        for expense in setting.annual_expenses:
            if (expense.due_date.year, expense.due_date.month) != setting.key:
                issues.append(ValidationIssue(
                    field="annual_expenses",
                    issue_type="expense_outside_month",
                    message=(
                        f"Annual expense '{expense.title}' is due "
                        f"{expense.due_date.isoformat()}, outside {setting.display_name}"
                    ),
                    severity="warning",
                    suggested_fix="Move the expense to the month it is due in",
                ))

        return issues

    def duplicate_issue(self, setting: MonthSetting) -> ValidationIssue:
        return ValidationIssue(
            field="month",
            issue_type="duplicate_setting",
            message=(
                f"More than one setting exists for {setting.display_name}; "
                "only the first one is used"
            ),
            severity="warning",
            suggested_fix="Delete the extra month setting",
        )

    def screen(
        self,
        settings: Iterable[MonthSetting],
    ) -> tuple[list[MonthSetting], list[ValidationIssue]]:
        """
        Run every check over a list of settings in one pass.

        Duplicate detection only considers settings that passed the
        calendar checks, so an invalid setting never shadows a valid one.

        Returns:
            (usable settings, first per month, in input order; all issues)
        """
        accepted: list[MonthSetting] = []
        issues: list[ValidationIssue] = []
        seen: set[tuple[int, int]] = set()

        for setting in settings:
            calendar_issues = self.validate_calendar(setting)
            if calendar_issues:
                issues.extend(calendar_issues)
                continue

            if setting.key in seen:
                issues.append(self.duplicate_issue(setting))
                continue
            seen.add(setting.key)

            issues.extend(self.validate_consistency(setting))
            accepted.append(setting)

        return accepted, issues

    def validate_all(self, settings: Iterable[MonthSetting]) -> list[ValidationIssue]:
        """Issues only. See screen()."""
        _, issues = self.screen(settings)
        return issues

    def get_user_friendly_summary(self, issues: list[ValidationIssue]) -> str:
        """
        Summarize issues for display next to the schedule.
        """
        if not issues:
            return "All month settings look good."

        lines = []

        errors = [i for i in issues if i.severity == "error"]
        warnings = [i for i in issues if i.severity == "warning"]

        if errors:
            lines.append("Some month settings were ignored:")
            for issue in errors:
                lines.append(f"   • {issue.message}")
                if issue.suggested_fix:
                    lines.append(f"     {issue.suggested_fix}")

        if warnings:
            if lines:
                lines.append("")
            lines.append("Please check the following:")
            for issue in warnings:
                lines.append(f"   • {issue.message}")

        return "\n".join(lines)
