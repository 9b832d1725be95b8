"""
Workflow step catalog.

The catalog is the read-only map (phase, step_number) → StepDefinition for one
workflow code. It is built once at startup and handed to the transition engine
explicitly through a CatalogRegistry stored on ``app.extensions``.

Lifecycle:
    static definition (services/catalogs/*.py)
        → WorkflowCatalog.from_definition()   validated, no ids
        → seed_step_definitions()             rows in step_definitions (skip-if-exists)
        → load_catalog()                      rebuilt from rows, ids attached
        → CatalogRegistry                     held by the app

Validation rules (CatalogConfigurationError on violation):
    - at least one step
    - phases dense from 1
    - step numbers dense from 1 inside each phase, no duplicates
    - every override target names an existing step
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from flask import current_app

from tenderflow.core.exceptions import CatalogConfigurationError, NotFoundError
from tenderflow.models import db
from tenderflow.models.workflow import WorkflowStep

logger = logging.getLogger(__name__)

EXTENSION_KEY = "tenderflow"


@dataclass(frozen=True)
class StepDefinition:
    """One step of a workflow. Immutable once loaded."""
    phase: int
    step_number: int
    title: str
    responsible_role: str
    description: str | None = None
    estimated_duration: int | None = None
    max_duration: int | None = None
    is_internal: bool = False
    on_reject_target: tuple[int, int] | None = None
    on_approve_target: tuple[int, int] | None = None
    on_remarks_target: tuple[int, int] | None = None
    workflow_code: str = "standard"
    id: int | None = None

    @property
    def position(self) -> tuple[int, int]:
        return (self.phase, self.step_number)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "workflow_code": self.workflow_code,
            "phase": self.phase,
            "step_number": self.step_number,
            "title": self.title,
            "description": self.description,
            "responsible_role": self.responsible_role,
            "estimated_duration": self.estimated_duration,
            "max_duration": self.max_duration,
            "is_internal": self.is_internal,
            "on_reject_target": list(self.on_reject_target) if self.on_reject_target else None,
            "on_approve_target": list(self.on_approve_target) if self.on_approve_target else None,
            "on_remarks_target": list(self.on_remarks_target) if self.on_remarks_target else None,
        }


def _target(phase, step):
    if phase is None or step is None:
        return None
    return (phase, step)


class WorkflowCatalog:
    """Validated, read-only set of steps for one workflow code."""

    def __init__(self, code: str, steps, name: str | None = None, phase_names: dict | None = None):
        self.code = code
        self.name = name or code
        self.phase_names = dict(phase_names or {})
        self._steps: dict[tuple[int, int], StepDefinition] = {}
        self._phases: dict[int, tuple[StepDefinition, ...]] = {}
        self._build(list(steps))

    # ── Construction ─────────────────────────────────────────────────────

    @classmethod
    def from_definition(cls, module) -> WorkflowCatalog:
        """Build a catalog from a static definition module (see services/catalogs)."""
        steps = [StepDefinition(workflow_code=module.WORKFLOW_CODE, **row) for row in module.STEPS]
        return cls(
            module.WORKFLOW_CODE,
            steps,
            name=getattr(module, "WORKFLOW_NAME", None),
            phase_names=getattr(module, "PHASE_NAMES", None),
        )

    @classmethod
    def from_rows(cls, code: str, rows, name: str | None = None, phase_names: dict | None = None) -> WorkflowCatalog:
        """Build a catalog from persisted WorkflowStep rows, attaching row ids."""
        steps = [
            StepDefinition(
                id=row.id,
                workflow_code=row.workflow_code,
                phase=row.phase,
                step_number=row.step_number,
                title=row.title,
                description=row.description,
                responsible_role=row.responsible_role,
                estimated_duration=row.estimated_duration,
                max_duration=row.max_duration,
                is_internal=bool(row.is_internal),
                on_reject_target=_target(row.on_reject_phase, row.on_reject_step),
                on_approve_target=_target(row.on_approve_phase, row.on_approve_step),
                on_remarks_target=_target(row.on_remarks_phase, row.on_remarks_step),
            )
            for row in rows
        ]
        return cls(code, steps, name=name, phase_names=phase_names)

    def _build(self, steps: list[StepDefinition]) -> None:
        problems: list[str] = []
        if not steps:
            raise CatalogConfigurationError(self.code, ["catalog has no steps"])

        for step in steps:
            if step.workflow_code != self.code:
                problems.append(f"step {step.phase}.{step.step_number} belongs to '{step.workflow_code}'")
            if step.phase < 1 or step.step_number < 1:
                problems.append(f"step {step.phase}.{step.step_number} has a non-positive position")
            if step.position in self._steps:
                problems.append(f"duplicate step {step.phase}.{step.step_number}")
                continue
            self._steps[step.position] = step

        phase_numbers = sorted({p for p, _ in self._steps})
        if phase_numbers != list(range(1, len(phase_numbers) + 1)):
            problems.append(f"phases are not dense from 1: {phase_numbers}")

        for phase in phase_numbers:
            in_phase = sorted(
                (s for s in self._steps.values() if s.phase == phase),
                key=lambda s: s.step_number,
            )
            numbers = [s.step_number for s in in_phase]
            if numbers != list(range(1, len(numbers) + 1)):
                problems.append(f"phase {phase} step numbers are not dense from 1: {numbers}")
            self._phases[phase] = tuple(in_phase)

        for step in self._steps.values():
            for label in ("on_reject_target", "on_approve_target", "on_remarks_target"):
                target = getattr(step, label)
                if target is not None and tuple(target) not in self._steps:
                    problems.append(
                        f"step {step.phase}.{step.step_number} {label} {tuple(target)} does not exist"
                    )

        if problems:
            raise CatalogConfigurationError(self.code, problems)

    # ── Lookups ──────────────────────────────────────────────────────────

    def get_step(self, phase: int, step: int) -> StepDefinition:
        try:
            return self._steps[(phase, step)]
        except KeyError:
            raise NotFoundError(resource="StepDefinition", resource_id=f"{self.code}:{phase}.{step}") from None

    def has_step(self, phase: int, step: int) -> bool:
        return (phase, step) in self._steps

    def steps_for_phase(self, phase: int) -> tuple[StepDefinition, ...]:
        """Steps of ``phase`` in step order; empty tuple for an unknown phase."""
        return self._phases.get(phase, ())

    def phases(self) -> list[int]:
        return sorted(self._phases)

    def last_step_number(self, phase: int) -> int | None:
        steps = self._phases.get(phase)
        return steps[-1].step_number if steps else None

    def first_step(self) -> StepDefinition:
        return self._steps[(1, 1)]

    def total_steps(self) -> int:
        return len(self._steps)

    def all_steps(self) -> list[StepDefinition]:
        return [s for phase in self.phases() for s in self._phases[phase]]

    def to_dict(self, include_steps: bool = False) -> dict:
        d = {
            "code": self.code,
            "name": self.name,
            "total_steps": self.total_steps(),
            "phases": [
                {
                    "phase": p,
                    "name": self.phase_names.get(p),
                    "step_count": len(self._phases[p]),
                }
                for p in self.phases()
            ],
        }
        if include_steps:
            d["steps"] = [s.to_dict() for s in self.all_steps()]
        return d

    def __repr__(self):
        return f"<WorkflowCatalog {self.code} steps={self.total_steps()}>"


class CatalogRegistry:
    """workflow_code → WorkflowCatalog. Immutable after bootstrap."""

    def __init__(self, catalogs=None):
        self._catalogs: dict[str, WorkflowCatalog] = {}
        for catalog in catalogs or ():
            self._catalogs[catalog.code] = catalog

    def get(self, code: str) -> WorkflowCatalog:
        catalog = self._catalogs.get(code)
        if catalog is None:
            raise NotFoundError(resource="Workflow", resource_id=code)
        return catalog

    def __contains__(self, code) -> bool:
        return code in self._catalogs

    def codes(self) -> list[str]:
        return sorted(self._catalogs)

    def all(self) -> list[WorkflowCatalog]:
        return [self._catalogs[c] for c in self.codes()]


# ═════════════════════════════════════════════════════════════════════════════
# Persistence
# ═════════════════════════════════════════════════════════════════════════════


def seed_step_definitions(catalog: WorkflowCatalog) -> int:
    """Persist ``catalog`` into step_definitions unless rows already exist.

    Idempotent per workflow code: a second run never duplicates or reorders
    rows. Flushes but does not commit.

    Returns:
        Number of rows inserted (0 when the workflow was already seeded).
    """
    existing = WorkflowStep.query.filter_by(workflow_code=catalog.code).count()
    if existing:
        logger.debug("Workflow '%s' already seeded (%d steps), skipping", catalog.code, existing)
        return 0

    for step in catalog.all_steps():
        reject = step.on_reject_target or (None, None)
        approve = step.on_approve_target or (None, None)
        remarks = step.on_remarks_target or (None, None)
        db.session.add(WorkflowStep(
            workflow_code=catalog.code,
            phase=step.phase,
            step_number=step.step_number,
            title=step.title,
            description=step.description,
            responsible_role=step.responsible_role,
            estimated_duration=step.estimated_duration,
            max_duration=step.max_duration,
            is_internal=step.is_internal,
            on_reject_phase=reject[0],
            on_reject_step=reject[1],
            on_approve_phase=approve[0],
            on_approve_step=approve[1],
            on_remarks_phase=remarks[0],
            on_remarks_step=remarks[1],
        ))
    db.session.flush()
    logger.info("Seeded workflow '%s' with %d steps", catalog.code, catalog.total_steps())
    return catalog.total_steps()


def load_catalog(code: str, name: str | None = None, phase_names: dict | None = None) -> WorkflowCatalog:
    """Rebuild a catalog from persisted rows. Raises CatalogConfigurationError if malformed."""
    rows = (
        WorkflowStep.query
        .filter_by(workflow_code=code)
        .order_by(WorkflowStep.phase, WorkflowStep.step_number)
        .all()
    )
    return WorkflowCatalog.from_rows(code, rows, name=name, phase_names=phase_names)


def bootstrap_catalogs(definitions=None) -> CatalogRegistry:
    """Validate, seed and load every built-in catalog; return the registry.

    Must run inside an application context. Commits the seed.
    """
    if definitions is None:
        from tenderflow.services.catalogs import BUILTIN_CATALOGS
        definitions = BUILTIN_CATALOGS.values()

    loaded = []
    for module in definitions:
        static = WorkflowCatalog.from_definition(module)
        seed_step_definitions(static)
        db.session.commit()
        loaded.append(load_catalog(static.code, name=static.name, phase_names=static.phase_names))

    registry = CatalogRegistry(loaded)
    logger.info("Workflow catalogs loaded: %s", ", ".join(registry.codes()))
    return registry


def install_registry(app, registry: CatalogRegistry) -> None:
    app.extensions.setdefault(EXTENSION_KEY, {})["catalogs"] = registry


def get_registry() -> CatalogRegistry:
    """Return the registry of the current Flask app."""
    try:
        return current_app.extensions[EXTENSION_KEY]["catalogs"]
    except KeyError:
        raise RuntimeError("Workflow catalogs are not loaded; call bootstrap_catalogs() in create_app") from None
