"""Validation rules for registration steps.

Each rule implements a specific check for the step being left."""

from __future__ import annotations

from .camping_options import CampingOptionSelectedRule
from .custom_fields import CustomFieldValuesRule
from .jobs import AlwaysRequiredCategoriesRule, CampingJobsRule, JobCountRule
from .profile import RequiredProfileFieldsRule
from .terms import TermsAcceptedRule

__all__ = [
    "AlwaysRequiredCategoriesRule",
    "CampingJobsRule",
    "CampingOptionSelectedRule",
    "CustomFieldValuesRule",
    "JobCountRule",
    "RequiredProfileFieldsRule",
    "TermsAcceptedRule",
]
