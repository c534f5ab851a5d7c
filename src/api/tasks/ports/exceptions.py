"""Domain exceptions for the Tasks bounded context."""


class TaskNotFoundError(Exception):
    """Raised when a task does not exist in the caller's scope.

    Tasks owned by another user or tenant are reported the same way as
    tasks that do not exist at all.
    """

    pass
