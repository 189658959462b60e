"""Step-aware selection validator.

Validation runs for the step being left, never the step being entered. Each
step maps to its own pipeline of pure rules; steps without rules always pass."""

from __future__ import annotations

import logging

from ..catalog import CatalogSnapshot
from ..models import ProfileData, UserAccount
from ..selection import RegistrationSelection
from ..steps import RegistrationStep
from .interfaces import StepContext, ValidationResult
from .rules import (
    AlwaysRequiredCategoriesRule,
    CampingJobsRule,
    CampingOptionSelectedRule,
    CustomFieldValuesRule,
    JobCountRule,
    RequiredProfileFieldsRule,
    TermsAcceptedRule,
)
from .validation_pipeline import ValidationPipeline

logger = logging.getLogger(__name__)


def build_default_pipelines() -> dict[RegistrationStep, ValidationPipeline]:
    return {
        RegistrationStep.PROFILE: ValidationPipeline([RequiredProfileFieldsRule()]),
        RegistrationStep.CAMPING_OPTIONS: ValidationPipeline([CampingOptionSelectedRule()]),
        RegistrationStep.CUSTOM_FIELDS: ValidationPipeline([CustomFieldValuesRule()]),
        RegistrationStep.JOBS: ValidationPipeline(
            [JobCountRule(), AlwaysRequiredCategoriesRule(), CampingJobsRule()]
        ),
        RegistrationStep.TERMS: ValidationPipeline([TermsAcceptedRule()]),
    }


class SelectionValidator:
    """Dispatches validation to the pipeline of the step being left."""

    def __init__(self, pipelines: dict[RegistrationStep, ValidationPipeline] | None = None) -> None:
        self.pipelines = pipelines if pipelines is not None else build_default_pipelines()

    def validate(
        self,
        step: RegistrationStep,
        selection: RegistrationSelection,
        catalog: CatalogSnapshot,
        profile: ProfileData | None = None,
        user: UserAccount | None = None,
    ) -> ValidationResult:
        """Validate a selection for the given step.

        Args:
            step: The step being left
            selection: Current registration selection
            catalog: Catalog snapshot
            profile: Profile data (used by the profile step)
            user: The registering user (staff-only job visibility)

        Returns:
            ValidationResult keyed by stable error keys
        """
        pipeline = self.pipelines.get(step)
        if pipeline is None:
            return ValidationResult.ok()
        context = StepContext(selection=selection, catalog=catalog, profile=profile, user=user)
        result = pipeline.validate(context)
        if not result.valid:
            logger.debug(f"Step {step.value} failed validation: {sorted(result.errors)}")
        return result


_default_validator = SelectionValidator()


def validate(
    step: RegistrationStep,
    selection: RegistrationSelection,
    catalog: CatalogSnapshot,
    profile: ProfileData | None = None,
    user: UserAccount | None = None,
) -> ValidationResult:
    """Validate with the default step pipelines."""
    return _default_validator.validate(step, selection, catalog, profile=profile, user=user)
