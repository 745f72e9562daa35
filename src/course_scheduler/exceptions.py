"""Custom exceptions for the course scheduler."""


class SchedulerError(Exception):
    """Base exception for scheduler errors."""

    pass


class InvalidInputError(SchedulerError):
    """Scheduling input failed structural validation."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        message = "Invalid scheduling input"
        if self.errors:
            message += ": " + "; ".join(self.errors)
        super().__init__(message)


class CatalogError(SchedulerError):
    """Time-slot or room catalog data is malformed."""

    def __init__(self, message: str, entry_id: str | None = None):
        self.entry_id = entry_id
        location = f" '{entry_id}'" if entry_id else ""
        super().__init__(f"Invalid catalog entry{location}: {message}")


class PolicyError(SchedulerError):
    """Scheduling policy file contents are malformed."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        location = f" in '{path}'" if path else ""
        super().__init__(f"Invalid scheduling policy{location}: {message}")
