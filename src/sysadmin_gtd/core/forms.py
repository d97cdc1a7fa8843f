# src/sysadmin_gtd/core/forms.py

"""
Modal data-entry forms.

A Form is plain data: field specs, the current values and the last
validation error. Validation is local to the form; nothing invalid ever
reaches the store.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from ..dates import parse_user_date
from ..errors import ValidationError
from ..tasks.task_models import Priority, Task


@dataclass(frozen=True, slots=True)
class FieldSpec:
    name: str
    title: str
    label: str
    choices: tuple[tuple[str, str], ...] = ()
    # Optional normaliser; raises ValidationError on bad input.
    parse: Callable[[str], str] | None = None


@dataclass(slots=True)
class Form:
    title: str
    fields: tuple[FieldSpec, ...]
    values: dict[str, str] = field(default_factory=dict)
    error: str | None = None

    def get_field(self, name: str) -> FieldSpec:
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(name)

    def validate(self, values: Mapping[str, str] | None = None) -> dict[str, str]:
        """
        Merge values over the current ones and check every field.

        Returns the cleaned values. On failure, records the message on the form
        (so the presentation can show it inline) and raises ValidationError.
        """
        merged = dict(self.values)
        if values:
            merged.update({k: v for k, v in values.items() if v is not None})

        cleaned: dict[str, str] = {}
        try:
            for spec in self.fields:
                raw = str(merged.get(spec.name, "") or "").strip()
                if not raw:
                    raise ValidationError(f"{spec.label} is required", field=spec.name)
                if spec.choices:
                    allowed = {value for _, value in spec.choices}
                    if raw.upper() in allowed:
                        raw = raw.upper()
                    elif raw not in allowed:
                        raise ValidationError(
                            f"{spec.label} must be one of {', '.join(sorted(allowed))}",
                            field=spec.name,
                        )
                if spec.parse is not None:
                    raw = spec.parse(raw)
                cleaned[spec.name] = raw
        except ValidationError as e:
            self.values = merged
            self.error = str(e)
            raise

        self.values = merged
        self.error = None
        return cleaned


def _task_fields(description_title: str, estimate_title: str) -> tuple[FieldSpec, ...]:
    return (
        FieldSpec("description", description_title, "Description"),
        FieldSpec(
            "priority",
            "Priority?",
            "Priority",
            choices=tuple((label, p.value) for label, p in Priority.options()),
        ),
        FieldSpec("time_estimate", estimate_title, "Time estimate"),
    )


def add_task_form() -> Form:
    return Form(
        title="Add task",
        fields=_task_fields("What do you need to do?", "Time estimate? (eg 30m, 2h, 1d)"),
        values={"priority": Priority.B.value},
    )


def edit_task_form(task: Task) -> Form:
    return Form(
        title="Edit task",
        fields=_task_fields("Description", "Time estimate?"),
        values={
            "description": task.description,
            "priority": Priority(task.priority).value,
            "time_estimate": task.time_estimate,
        },
    )


def view_date_form() -> Form:
    return Form(
        title="View another day",
        fields=(FieldSpec("date", "Date (dd/mm/yyyy)", "Date", parse=parse_user_date),),
    )
