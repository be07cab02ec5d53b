from academics.exceptions import NotFound


class ChangeRequestError(Exception):
    pass


class ValidationFailure(ChangeRequestError):
    """One or more structural rules failed; ``errors`` is shown to the caller verbatim."""

    def __init__(self, errors, warnings=None):
        self.errors = list(errors)
        self.warnings = list(warnings or [])
        super().__init__("; ".join(self.errors) or "Invalid change request")


class RoutingError(ChangeRequestError):
    """No program could be assigned. Missing reference data, not a transient fault."""


RoutingFailure = RoutingError


class InvalidStateTransition(ChangeRequestError):
    def __init__(self, request_id, current, target):
        self.request_id = request_id
        self.current = current
        self.target = target
        super().__init__(
            f"Change request {request_id} is {current} and cannot move to {target}"
        )


__all__ = [
    "ChangeRequestError",
    "InvalidStateTransition",
    "NotFound",
    "RoutingError",
    "RoutingFailure",
    "ValidationFailure",
]
