"""Validation package."""

from invoice_scheduler.validation.validator import MonthSettingValidator

__all__ = ["MonthSettingValidator"]
