"""GraphQL fragment and CMS content registry.

Declare each content component once and derive fragment definitions,
flexible-content selections and validated component data from it.
"""

from pigeon.errors import (
    ContentValidationError,
    PigeonError,
    RegistrationError,
    UnknownDependencyError,
    UnknownTypenameError,
)
from pigeon.instance import Pigeon, create_pigeon
from pigeon.registration import Registration, create_dependency, create_registration
from pigeon.schemas import CMSRecord, cms_schema

__all__ = [
    "Pigeon",
    "create_pigeon",
    "Registration",
    "create_registration",
    "create_dependency",
    "CMSRecord",
    "cms_schema",
    "PigeonError",
    "RegistrationError",
    "UnknownDependencyError",
    "UnknownTypenameError",
    "ContentValidationError",
]
