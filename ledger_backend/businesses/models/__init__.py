# businesses/models/__init__.py

from businesses.models.business import Business
from businesses.models.company_setting import CompanySetting
from businesses.models.sequence import DocumentSequence

__all__ = [
    "Business",
    "CompanySetting",
    "DocumentSequence",
]
