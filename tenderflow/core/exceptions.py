"""
Service-layer exception hierarchy.

Services raise these; blueprints register handlers against them once
(see ``tenderflow.utils.errors.register_error_handlers``) and get consistent
HTTP status codes everywhere.

Usage:
    from tenderflow.core.exceptions import NotFoundError, InvalidStateError

    raise NotFoundError(resource="Tender", resource_id=tender_id)
    raise InvalidStateError("Tender is completed", status="completed")

"Unassigned" is deliberately not an exception: a step without an eligible
actor is stored as ``current_actor_id = None`` and the transition commits.
"""


class NotFoundError(Exception):
    """Raised when a tender, user or step definition does not exist.

    Args:
        resource: Human-readable entity name (e.g. "Tender", "StepDefinition").
        resource_id: The key that was looked up. Included in the message.
    """

    def __init__(self, resource: str, resource_id: int | str | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        msg = f"{resource}"
        if resource_id is not None:
            msg += f" id={resource_id}"
        msg += " not found"
        super().__init__(msg)


class ValidationError(Exception):
    """Raised when well-formed input violates a business rule.

    Maps to HTTP 422 in blueprint error handlers.

    Args:
        message: Human-readable explanation of what failed.
        details: Optional field-level breakdown for structured API responses.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class ConflictError(Exception):
    """Raised when a concurrent writer already moved the tender (optimistic lock).

    Maps to HTTP 409. The caller may re-read the tender and decide again;
    the engine never retries on its own.
    """

    def __init__(self, resource: str, resource_id: str | None = None, message: str | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(message or f"{resource} id={resource_id} was modified concurrently")


class InvalidStateError(Exception):
    """Raised when a transition is requested on a tender that cannot accept it.

    Typical cause: status is 'completed' or 'cancelled'. Nothing is written.

    Args:
        message: Human-readable explanation.
        status: The tender status that blocked the transition.
    """

    def __init__(self, message: str, status: str | None = None) -> None:
        self.status = status
        super().__init__(message)


class InternalInconsistencyError(Exception):
    """Raised when stored tender state disagrees with the step catalog.

    Indicates a deployment or seed-data bug, not a user mistake. Logged at
    error level; surfaced to clients as a generic 500. The unit of work is
    rolled back before this propagates.
    """


class CatalogConfigurationError(Exception):
    """Raised at load time when a workflow catalog is malformed.

    Gaps in phase or step numbering, duplicate positions and override targets
    that point outside the catalog are all fatal configuration errors.
    """

    def __init__(self, workflow_code: str, problems: list[str]) -> None:
        self.workflow_code = workflow_code
        self.problems = problems
        super().__init__(f"Workflow catalog '{workflow_code}' is invalid: " + "; ".join(problems))
