from pydantic import BaseModel

from mealbook.utils.months import MonthKey


class HouseholdSettings(BaseModel):
    """Singleton settings document; ``current_month`` is the default dashboard lens."""
    current_month: MonthKey


class SettingsUpdate(BaseModel):
    current_month: MonthKey
