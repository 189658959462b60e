"""Validation pipeline for orchestrating validation rules.

Runs every rule of a step in priority order and combines their results. Rules
never short-circuit each other."""

from __future__ import annotations

from .interfaces import StepContext, ValidationResult, ValidationRule


class ValidationPipeline:
    """Orchestrates the validation rules of one registration step"""

    def __init__(self, rules: list[ValidationRule] | None = None) -> None:
        """Initialize the validation pipeline

        Args:
            rules: Initial rules, in any order
        """
        self.rules: list[ValidationRule] = []
        for rule in rules or []:
            self.add_rule(rule)

    def add_rule(self, rule: ValidationRule) -> None:
        """Add a validation rule to the pipeline.

        Args:
            rule: The validation rule to add
        """
        self.rules.append(rule)
        # Sort by priority (descending)
        self.rules.sort(key=lambda r: r.priority, reverse=True)

    def validate(self, context: StepContext) -> ValidationResult:
        """Validate a selection through all rules.

        Args:
            context: The selection and catalog to validate

        Returns:
            Combined ValidationResult from all rules
        """
        combined_result = ValidationResult.ok()

        for rule in self.rules:
            combined_result = combined_result.merge(rule.validate(context))

        return combined_result
