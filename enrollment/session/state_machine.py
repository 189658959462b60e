"""
Registration session state machine.

Drives one user's registration through PROFILE, CAMPING_OPTIONS, CUSTOM_FIELDS,
JOBS, TERMS, PAYMENT and COMPLETE. Moving forward validates the step being
left; moving back never validates. Each part of the selection can only be
changed on its own step, and nothing can be changed once the registration has
been submitted. Going back after submission only revisits earlier steps.

Upstream calls (profile update, submission, payment initiation) go through the
gateway, and their failures are recorded as session-level errors the user can
retry.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from ..capacity import Partition, is_option_selectable, partition_camping_options, partition_jobs
from ..catalog import CatalogSnapshot
from ..client import RegistrationGateway
from ..config.settings import Settings, get_settings
from ..costs import calculate_total
from ..eligibility import deferred_dues_allowed, ensure_can_register, is_job_selectable, job_visible_to
from ..eligibility import jobs_in_scope as scope_jobs
from ..errors import FieldValueError, GatewayError, InvalidTransitionError, SelectionError, SessionClosedError
from ..field_values import parse_field_value
from ..models import CampingOption, CustomField, Job, ProfileData, SiteConfig, UserAccount
from ..payments import CheckoutSession, PaymentRequest
from ..requirements import JobRequirements, compute_requirements
from ..selection import RegistrationSelection
from ..steps import RegistrationStep
from ..submission import build_submission
from ..validation import CAMPING_OPTIONS, PAYMENT, PROFILE, SUBMIT, SelectionValidator, ValidationResult, field_key
from .fetch_tokens import FetchGenerations

logger = logging.getLogger(__name__)

CUSTOM_FIELDS_FETCH = "custom_fields"

_FIELDS_NOT_LOADED = "Camping option details are still loading, please try again"


class RegistrationSession:
    """A single user's registration in progress."""

    def __init__(
        self,
        gateway: RegistrationGateway,
        catalog: CatalogSnapshot,
        site: SiteConfig,
        user: UserAccount,
        profile: ProfileData | None = None,
        settings: Settings | None = None,
        validator: SelectionValidator | None = None,
        session_id: str | None = None,
    ):
        self.id = session_id or uuid.uuid4().hex
        self.gateway = gateway
        self.catalog = catalog
        self.site = site
        self.user = user
        self.profile = profile or ProfileData()
        self.settings = settings or get_settings()
        self.validator = validator or SelectionValidator()
        self.selection = RegistrationSelection()

        self.registration_id: str | None = None
        self.checkout: CheckoutSession | None = None
        self.payment_reference: str | None = None
        self.dues_deferred = False

        self._step = RegistrationStep.PROFILE
        self._last_result = ValidationResult.ok()
        self._session_errors: dict[str, str] = {}
        self._field_errors: dict[str, str] = {}
        self._fetches = FetchGenerations()
        self._cache: dict[str, Any] = {}

    @classmethod
    async def start(
        cls,
        gateway: RegistrationGateway,
        settings: Settings | None = None,
        validator: SelectionValidator | None = None,
    ) -> RegistrationSession:
        """Load the user, site config and catalog, then open a session.

        Raises:
            RegistrationClosedError: If the user may not register now
            GatewayError: If any upstream load fails
        """
        site, (user, profile), options, categories, jobs, shifts = await asyncio.gather(
            gateway.get_site_config(),
            gateway.get_current_user(),
            gateway.get_camping_options(),
            gateway.get_job_categories(),
            gateway.get_jobs(),
            gateway.get_shifts(),
        )
        ensure_can_register(site, user)
        catalog = CatalogSnapshot.build(
            camping_options=options,
            job_categories=categories,
            jobs=jobs,
            shifts=shifts,
        )
        session = cls(gateway, catalog, site, user, profile=profile, settings=settings, validator=validator)
        logger.info(
            f"Started registration session {session.id} for user {user.id} "
            f"({len(options)} camping options, {len(jobs)} jobs)"
        )
        return session

    # State

    @property
    def step(self) -> RegistrationStep:
        return self._step

    @property
    def submitted(self) -> bool:
        return self.registration_id is not None

    @property
    def errors(self) -> dict[str, str]:
        """Current errors: last step validation, field parse errors and upstream failures."""
        errors = dict(self._last_result.errors)
        errors.update(self._visible_field_errors())
        errors.update(self._session_errors)
        return errors

    def is_loading(self, key: str) -> bool:
        return self._fetches.is_loading(key)

    @property
    def deferral_allowed(self) -> bool:
        return deferred_dues_allowed(self.site, self.user)

    # Derived state

    def _cached(self, key: str, compute: Any) -> Any:
        if key not in self._cache:
            self._cache[key] = compute()
        return self._cache[key]

    def _invalidate_derived(self) -> None:
        self._cache.clear()

    @property
    def requirements(self) -> JobRequirements:
        return self._cached(
            "requirements", lambda: compute_requirements(self.catalog, self.selection.camping_option_ids)
        )

    @property
    def jobs_in_scope(self) -> list[Job]:
        """Jobs offered for the selected options and visible to this user."""
        return self._cached(
            "jobs_in_scope",
            lambda: [
                job
                for job in scope_jobs(self.catalog, self.selection.camping_option_ids)
                if job_visible_to(self.catalog, job, self.user)
            ],
        )

    @property
    def job_partition(self) -> Partition[Job]:
        return self._cached("job_partition", lambda: partition_jobs(self.jobs_in_scope))

    @property
    def available_jobs(self) -> tuple[Job, ...]:
        return self.job_partition.available

    @property
    def camping_option_partition(self) -> Partition[CampingOption]:
        return partition_camping_options(o for o in self.catalog.camping_options if o.enabled)

    @property
    def custom_fields(self) -> list[CustomField]:
        return self.catalog.fields_for(self.selection.camping_option_ids)

    @property
    def total(self) -> Decimal:
        return calculate_total(self.catalog, self.selection.camping_option_ids, self.user.role)

    # Mutators

    def _ensure_editable(self, step: RegistrationStep) -> None:
        if self._step.is_terminal:
            raise SessionClosedError(f"Registration session {self.id} is complete")
        if self.submitted:
            raise InvalidTransitionError("Registration has already been submitted")
        if self._step is not step:
            raise InvalidTransitionError(
                f"This can only be changed on the {step.value} step, not the {self._step.value} step"
            )

    def toggle_camping_option(self, camping_option_id: str) -> bool:
        """Select or deselect a camping option. Returns True when it ends up selected."""
        self._ensure_editable(RegistrationStep.CAMPING_OPTIONS)
        selected = self.selection.camping_option_ids
        if camping_option_id in selected:
            selected.discard(camping_option_id)
            is_selected = False
        else:
            option = self.catalog.option_by_id.get(camping_option_id)
            if option is None:
                raise SelectionError(f"Unknown camping option {camping_option_id}")
            if not is_option_selectable(option):
                raise SelectionError(f"{option.name} is not available")
            selected.add(camping_option_id)
            is_selected = True
        self._camping_options_changed()
        return is_selected

    def _camping_options_changed(self) -> None:
        self._invalidate_derived()
        self._fetches.invalidate(CUSTOM_FIELDS_FETCH)
        # Drop jobs the new option selection no longer offers
        in_scope = {job.id for job in self.jobs_in_scope}
        dropped = self.selection.job_ids - in_scope
        if dropped:
            self.selection.job_ids -= dropped
            logger.debug(f"Session {self.id}: dropped out-of-scope jobs {sorted(dropped)}")

    def toggle_job(self, job_id: str) -> bool:
        """Select or deselect a job. Returns True when it ends up selected."""
        self._ensure_editable(RegistrationStep.JOBS)
        if job_id in self.selection.job_ids:
            self.selection.job_ids.discard(job_id)
            return False
        job = self.catalog.job_by_id.get(job_id)
        if job is None:
            raise SelectionError(f"Unknown job {job_id}")
        if job_id not in {j.id for j in self.jobs_in_scope}:
            raise SelectionError(f"{job.name} is not offered for the selected camping options")
        if not is_job_selectable(self.catalog, job, self.user):
            raise SelectionError(f"{job.name} is full")
        self.selection.job_ids.add(job_id)
        return True

    def set_custom_field(self, field_id: str, raw: object) -> None:
        """Parse and store the answer to a custom field of a selected option.

        Unparseable input is recorded as a field error and clears the stored
        answer until corrected.
        """
        self._ensure_editable(RegistrationStep.CUSTOM_FIELDS)
        custom_field = next((f for f in self.custom_fields if f.id == field_id), None)
        if custom_field is None:
            raise SelectionError(f"Unknown custom field {field_id}")
        key = field_key(field_id)
        values = self.selection.custom_field_values
        try:
            value = parse_field_value(custom_field, raw)
        except FieldValueError as e:
            self._field_errors[key] = str(e)
            values.pop(field_id, None)
            return
        self._field_errors.pop(key, None)
        if value is None:
            values.pop(field_id, None)
        else:
            values[field_id] = value

    def accept_terms(self, accepted: bool = True) -> None:
        self._ensure_editable(RegistrationStep.TERMS)
        self.selection.accepted_terms = accepted

    def update_profile(self, changes: Mapping[str, Any]) -> ProfileData:
        """Merge profile changes (camelCase or snake_case keys)."""
        self._ensure_editable(RegistrationStep.PROFILE)
        incoming = ProfileData.model_validate(dict(changes)).model_dump(by_alias=True, exclude_unset=True)
        merged = {**self.profile.model_dump(by_alias=True), **incoming}
        self.profile = ProfileData.model_validate(merged)
        return self.profile

    # Custom field loading

    async def load_custom_fields(self) -> None:
        """Fetch field definitions for selected options that have none loaded yet."""
        missing = [option.id for option in self._options_without_fields()]
        if missing:
            await asyncio.gather(*(self._load_fields_for(option_id) for option_id in missing))

    def _options_without_fields(self) -> list[CampingOption]:
        return [
            option
            for option in self.catalog.selected_options(self.selection.camping_option_ids)
            if not self.catalog.has_fields_for(option.id)
        ]

    async def _load_fields_for(self, camping_option_id: str) -> None:
        key = f"{CUSTOM_FIELDS_FETCH}:{camping_option_id}"
        generation = self._fetches.begin(key)
        try:
            fields = await self.gateway.get_camping_option_fields(camping_option_id)
        except GatewayError:
            logger.warning(f"Session {self.id}: failed to load fields for camping option {camping_option_id}")
            raise
        finally:
            self._fetches.finish(key, generation)

        if not self._fetches.is_current(key, generation):
            logger.debug(f"Session {self.id}: discarding stale fields for camping option {camping_option_id}")
            return
        self.catalog = self.catalog.with_custom_fields(camping_option_id, fields)
        self._invalidate_derived()

    # Transitions

    def _validate_step(self, step: RegistrationStep) -> ValidationResult:
        result = self.validator.validate(step, self.selection, self.catalog, profile=self.profile, user=self.user)
        if step is RegistrationStep.CUSTOM_FIELDS:
            result = result.merge(ValidationResult(self._visible_field_errors()))
        return result

    def _visible_field_errors(self) -> dict[str, str]:
        keys = {field_key(f.id) for f in self.custom_fields}
        return {k: v for k, v in self._field_errors.items() if k in keys}

    def _move_to(self, step: RegistrationStep) -> None:
        logger.info(f"Session {self.id}: {self._step.value} -> {step.value}")
        self._step = step
        if step is RegistrationStep.CAMPING_OPTIONS:
            self._invalidate_derived()
            self._fetches.invalidate(CUSTOM_FIELDS_FETCH)

    def _fail(self, key: str, message: str) -> ValidationResult:
        self._session_errors[key] = message
        return ValidationResult.error(key, message)

    async def advance(self, pay_later: bool = False) -> ValidationResult:
        """Validate the current step and move forward if it passes.

        Args:
            pay_later: When leaving TERMS (or in PAYMENT), complete without
                paying if deferred dues are permitted

        Returns:
            The validation result. Invalid results leave the step unchanged.
        """
        step = self._step
        if step.is_terminal:
            raise SessionClosedError(f"Registration session {self.id} is complete")
        if step is RegistrationStep.PAYMENT:
            if pay_later:
                self.defer_payment()
                return ValidationResult.ok()
            raise InvalidTransitionError("Payment must be confirmed or deferred to finish")

        self._session_errors.clear()
        result = self._validate_step(step)
        self._last_result = result
        if not result.valid:
            return result

        if step is RegistrationStep.PROFILE:
            try:
                await self.gateway.update_profile(self.user.id, self.profile)
            except GatewayError as e:
                logger.error(f"Session {self.id}: profile update failed: {e}")
                return self._fail(PROFILE, f"Could not save your profile: {e}")
            self._move_to(RegistrationStep.CAMPING_OPTIONS)
            return result

        if step is RegistrationStep.TERMS:
            return await self._submit(pay_later)

        next_step = step.next
        assert next_step is not None
        if next_step is RegistrationStep.CUSTOM_FIELDS:
            selected = frozenset(self.selection.camping_option_ids)
            await self.load_custom_fields()
            if self.selection.camping_option_ids != selected or self._options_without_fields():
                logger.info(f"Session {self.id}: camping options changed while their fields were loading")
                return self._fail(CAMPING_OPTIONS, _FIELDS_NOT_LOADED)
        self._move_to(next_step)
        return result

    def _validate_before_submit(self) -> ValidationResult:
        """Every step up to TERMS, against the selection as it is now."""
        result = ValidationResult.ok()
        for step in RegistrationStep:
            if step is RegistrationStep.PAYMENT:
                break
            result = result.merge(self._validate_step(step))
        if self._options_without_fields():
            result = result.merge(ValidationResult.error(CAMPING_OPTIONS, _FIELDS_NOT_LOADED))
        return result

    async def _submit(self, pay_later: bool) -> ValidationResult:
        if self.submitted:
            logger.info(f"Session {self.id}: registration {self.registration_id} already submitted")
            return self._after_submission(pay_later)

        result = self._validate_before_submit()
        if not result.valid:
            logger.warning(f"Session {self.id}: refusing to submit, failing checks {sorted(result.errors)}")
            self._last_result = result
            return result

        payload = build_submission(self.catalog, self.selection)
        try:
            self.registration_id = await self.gateway.submit_registration(payload)
        except GatewayError as e:
            logger.error(f"Session {self.id}: registration submission failed: {e}")
            return self._fail(SUBMIT, f"Could not submit your registration: {e}")
        logger.info(f"Session {self.id}: submitted registration {self.registration_id}")
        return self._after_submission(pay_later)

    def _after_submission(self, pay_later: bool) -> ValidationResult:
        if self.total == 0:
            self._move_to(RegistrationStep.COMPLETE)
        elif pay_later and self.deferral_allowed:
            self.dues_deferred = True
            self._move_to(RegistrationStep.COMPLETE)
        else:
            if pay_later:
                logger.info(f"Session {self.id}: deferred dues not permitted, payment required")
            self._move_to(RegistrationStep.PAYMENT)
        return ValidationResult.ok()

    def back(self) -> RegistrationStep:
        """Move to the previous step without validating.

        After submission the earlier steps can be revisited but not changed,
        and leaving TERMS again reuses the existing registration.
        """
        step = self._step
        if step.is_terminal:
            raise SessionClosedError(f"Registration session {self.id} is complete")
        previous = step.previous
        if previous is None:
            return step
        self._last_result = ValidationResult.ok()
        self._session_errors.clear()
        self._move_to(previous)
        return previous

    # Payment

    def _ensure_payment_step(self) -> None:
        if self._step.is_terminal:
            raise SessionClosedError(f"Registration session {self.id} is complete")
        if self._step is not RegistrationStep.PAYMENT or self.registration_id is None:
            raise InvalidTransitionError("Payment is only available after submitting the registration")

    async def start_payment(self) -> CheckoutSession | None:
        """Initiate a card payment for the submitted registration.

        Returns:
            The checkout session, or None when initiation failed (see errors)
        """
        self._ensure_payment_step()
        assert self.registration_id is not None
        self._session_errors.pop(PAYMENT, None)
        request = PaymentRequest.for_registration(self.total, self.user.id, self.registration_id, self.settings)
        try:
            self.checkout = await self.gateway.initiate_payment(request)
        except GatewayError as e:
            logger.error(f"Session {self.id}: payment initiation failed: {e}")
            self._fail(PAYMENT, f"Could not start payment: {e}")
            return None
        logger.info(f"Session {self.id}: payment started for {request.amount_cents} cents {request.currency}")
        return self.checkout

    def confirm_payment(self, reference: str) -> None:
        """Record a completed payment and finish the registration."""
        self._ensure_payment_step()
        if self.checkout is None:
            raise InvalidTransitionError("Payment has not been started")
        if not reference:
            raise InvalidTransitionError("A payment reference is required")
        self.payment_reference = reference
        self._session_errors.pop(PAYMENT, None)
        self._move_to(RegistrationStep.COMPLETE)

    def defer_payment(self) -> None:
        """Finish without paying now. Requires site and account permission."""
        self._ensure_payment_step()
        if not self.deferral_allowed:
            raise InvalidTransitionError("Paying later is not permitted for this registration")
        self.dues_deferred = True
        self._move_to(RegistrationStep.COMPLETE)
