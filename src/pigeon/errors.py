# errors.py

from typing import Any


class PigeonError(Exception):
    """Base class for pigeon errors."""
    pass


# ----- Declaration Errors -----

class RegistrationError(PigeonError):
    """Raised when a component declaration is malformed."""
    pass


class UnknownDependencyError(RegistrationError):
    """Raised when a dependency typename is not registered."""

    def __init__(self, typename: str, required_by: str) -> None:
        super().__init__(f"{required_by} depends on unregistered component {typename!r}")
        self.typename = typename
        self.required_by = required_by


# ----- Content Errors -----

class UnknownTypenameError(PigeonError):
    """Raised for unregistered records when dropping is disabled."""

    def __init__(self, typename: Any, index: int) -> None:
        super().__init__(f"record {index} has unregistered __typename {typename!r}")
        self.typename = typename
        self.index = index


class ContentValidationError(PigeonError):
    """Raised when CMS data does not satisfy a component schema."""

    def __init__(
        self,
        typename: str,
        message: str,
        index: int | None = None,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        location = f"record {index} ({typename})" if index is not None else typename
        super().__init__(f"{location}: {message}")
        self.typename = typename
        self.index = index
        self.errors = errors or []
