"""
portal.forms.wizard: Multi-step form container.

A :class:`StepForm` holds a current step (1..N) and a flat ``form_data`` map
seeded from the variant's defaults and overlaid with ``initial_data``.
Moving between steps is never gated; only :meth:`StepForm.submit` checks the
variant's required fields.  Forms never talk to the network: ``submit`` hands
the payload to a caller-supplied callback.
"""

from __future__ import annotations

import copy
from typing import Any, Callable, Dict, List, Optional, Tuple

from portal.core.constants import MISSING_FIELDS_MESSAGE
from portal.core.utils import is_filled
from portal.domain.enums import IntakeFormType


class FormIncomplete(ValueError):
    """Submit was attempted before the final step or with required fields empty."""

    def __init__(self, missing: Optional[List[str]] = None, message: str = MISSING_FIELDS_MESSAGE) -> None:
        super().__init__(message)
        self.message = message
        self.missing = missing or []


class StepForm:
    """Base wizard.  Variants set the class attributes below."""

    form_type: IntakeFormType
    step_titles: Tuple[str, ...] = ()
    required_fields: Tuple[str, ...] = ()
    defaults: Dict[str, Any] = {}
    options: Dict[str, Tuple[str, ...]] = {}

    def __init__(self, initial_data: Optional[Dict[str, Any]] = None) -> None:
        self.step = 1
        self.form_data: Dict[str, Any] = copy.deepcopy(self.defaults)
        self.form_data.update(self.seed(dict(initial_data or {})))

    # ------------------------------------------------------------------
    # Hooks for variants
    # ------------------------------------------------------------------

    def seed(self, initial_data: Dict[str, Any]) -> Dict[str, Any]:
        """Adjust ``initial_data`` before it is overlaid on the defaults."""
        return initial_data

    def warnings(self) -> List[str]:
        """Soft, non-blocking hints shown next to the form."""
        return []

    def to_payload(self) -> Dict[str, Any]:
        return copy.deepcopy(self.form_data)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    @property
    def total_steps(self) -> int:
        return len(self.step_titles)

    @property
    def is_last_step(self) -> bool:
        return self.step == self.total_steps

    def next(self) -> int:
        self.step = min(self.total_steps, self.step + 1)
        return self.step

    def previous(self) -> int:
        self.step = max(1, self.step - 1)
        return self.step

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def update(self, fields: Dict[str, Any]) -> None:
        self.form_data.update(fields)

    def toggle_option(self, field: str, value: str, checked: bool) -> List[str]:
        """Add or remove ``value`` from the multi-select list ``field``."""
        current = list(self.form_data.get(field) or [])
        if checked and value not in current:
            current.append(value)
        elif not checked:
            current = [v for v in current if v != value]
        self.form_data[field] = current
        return current

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def missing_required(self) -> List[str]:
        return [f for f in self.required_fields if not is_filled(self.form_data.get(f))]

    @property
    def can_submit(self) -> bool:
        return not self.missing_required()

    def submit(self, on_submit: Callable[[Dict[str, Any]], Any]) -> Any:
        """Pass the payload to ``on_submit`` and return whatever it returns.

        ``on_submit`` may be a coroutine function; the caller then awaits the
        returned coroutine.
        """
        if not self.is_last_step:
            raise FormIncomplete(message=f"Complete all {self.total_steps} steps before submitting")
        missing = self.missing_required()
        if missing:
            raise FormIncomplete(missing)
        return on_submit(self.to_payload())

    # ------------------------------------------------------------------
    # Serialisation (draft storage and page data)
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {"form_type": self.form_type.value, "step": self.step, "form_data": self.form_data}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StepForm":
        form = cls()
        form.form_data = copy.deepcopy(data.get("form_data") or form.form_data)
        form.step = min(max(1, int(data.get("step") or 1)), form.total_steps)
        form.restore(data)
        return form

    def restore(self, data: Dict[str, Any]) -> None:
        """Reload state kept outside ``form_data``."""

    def view(self) -> Dict[str, Any]:
        """Everything a page needs to render the current step."""
        steps = []
        for number, title in enumerate(self.step_titles, start=1):
            if number < self.step:
                state = "complete"
            elif number == self.step:
                state = "current"
            else:
                state = "upcoming"
            steps.append({"number": number, "title": title, "state": state})
        return {
            **self.to_dict(),
            "total_steps": self.total_steps,
            "steps": steps,
            "can_submit": self.can_submit,
            "missing": self.missing_required(),
            "warnings": self.warnings(),
            "options": {k: list(v) for k, v in self.options.items()},
        }
