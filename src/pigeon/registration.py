from __future__ import annotations

"""Component declarations.

A registration bundles everything pigeon needs to know about one piece of
CMS content: its ``__typename``, the fragment that fetches it, the other
components that fragment spreads, the schema used to validate and transform
the returned JSON, and the scopes it is queried under.
"""

import inspect
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, Union

from pydantic import PydanticSchemaGenerationError, TypeAdapter, ValidationError

from pigeon.config import get_settings
from pigeon.errors import ContentValidationError, RegistrationError

GRAPHQL_NAME = re.compile(r"^[_A-Za-z][_0-9A-Za-z]*$")

Dependency = Union["Registration", str]
Transform = Callable[[Any], Any]


@dataclass(frozen=True, eq=False)
class Registration:
    """A registered piece of CMS content."""

    typename: str
    fragment_name: str
    # Full definition: ``fragment <fragment_name> on <typename> {<body>}``.
    fragment: str
    schema: Any
    dependencies: tuple[Dependency, ...] = ()
    scope: tuple[str, ...] = ()
    transform: Transform | None = None
    _adapter: TypeAdapter = field(init=False, repr=False)

    def __post_init__(self) -> None:
        try:
            adapter = TypeAdapter(self.schema)
        except PydanticSchemaGenerationError as e:
            raise RegistrationError(f"{self.typename}: unsupported schema {self.schema!r}") from e
        object.__setattr__(self, "_adapter", adapter)

    def in_scope(self, name: str) -> bool:
        return name in self.scope

    def inline_fragment(self) -> str:
        """Selection used inside a polymorphic field."""
        return f"...on {self.typename} {{ ...{self.fragment_name} }}"

    def _validate(self, data: Any, index: int | None) -> Any:
        try:
            return self._adapter.validate_python(data)
        except ValidationError as e:
            raise ContentValidationError(
                self.typename,
                f"{e.error_count()} validation error(s)",
                index=index,
                errors=e.errors(include_url=False),
            ) from e

    def _transform_failed(self, e: Exception, index: int | None) -> ContentValidationError:
        return ContentValidationError(self.typename, f"transform failed: {e}", index=index)

    def parse(self, data: Any, *, index: int | None = None) -> Any:
        """Validate ``data`` and apply the transform, if any."""
        value = self._validate(data, index)
        if self.transform is None:
            return value
        try:
            result = self.transform(value)
        except (TypeError, ValueError) as e:
            raise self._transform_failed(e, index) from e
        if inspect.isawaitable(result):
            if inspect.iscoroutine(result):
                result.close()
            raise RegistrationError(f"{self.typename}: transform is async, use parse_async()")
        return result

    async def parse_async(self, data: Any, *, index: int | None = None) -> Any:
        """Like :meth:`parse` but awaits async transforms."""
        value = self._validate(data, index)
        if self.transform is None:
            return value
        try:
            result = self.transform(value)
            if inspect.isawaitable(result):
                result = await result
        except (TypeError, ValueError) as e:
            raise self._transform_failed(e, index) from e
        return result


def _check_name(kind: str, value: str) -> str:
    if not isinstance(value, str) or not GRAPHQL_NAME.match(value):
        raise RegistrationError(f"invalid {kind} {value!r}: must be a GraphQL name")
    return value


def _normalize_dependencies(typename: str, dependencies: Iterable[Dependency] | None) -> tuple[Dependency, ...]:
    normalized: list[Dependency] = []
    for dependency in dependencies or ():
        if isinstance(dependency, Registration):
            normalized.append(dependency)
        elif isinstance(dependency, str):
            normalized.append(_check_name("dependency typename", dependency))
        else:
            raise RegistrationError(
                f"{typename}: dependencies must be registrations or typenames, got {dependency!r}"
            )
    return tuple(normalized)


def _normalize_scope(typename: str, scope: Iterable[str] | None) -> tuple[str, ...]:
    if isinstance(scope, str):
        # A bare string would otherwise be split into characters.
        return (scope,)
    names = tuple(scope or ())
    for name in names:
        if not isinstance(name, str) or not name:
            raise RegistrationError(f"{typename}: scope names must be non-empty strings")
    return names


def create_registration(
    typename: str,
    fragment: str,
    schema: Any,
    *,
    dependencies: Iterable[Dependency] | None = None,
    scope: Iterable[str] | None = None,
    fragment_name: str | None = None,
    transform: Transform | None = None,
) -> Registration:
    """Prepare a piece of content for registration with a :class:`Pigeon`.

    ``fragment`` is only the inner selection; the ``fragment X on Y`` wrapper
    is generated. Fragments of other components are spread by name and listed
    in ``dependencies`` so they get collected when queries are built::

        image = create_registration("ImageRecord", "url alt", ImageSchema)
        hero = create_registration(
            "HeroRecord",
            f"title image {{ ...{image.fragment_name} }}",
            HeroSchema,
            dependencies=[image],
            scope=["page"],
        )
    """
    _check_name("typename", typename)
    if fragment_name is None:
        fragment_name = f"{typename}{get_settings().fragment_suffix}"
    _check_name("fragment name", fragment_name)
    if not isinstance(fragment, str):
        raise RegistrationError(f"{typename}: fragment must be a string")
    if transform is not None and not callable(transform):
        raise RegistrationError(f"{typename}: transform must be callable")

    return Registration(
        typename=typename,
        fragment_name=fragment_name,
        fragment=f"fragment {fragment_name} on {typename} {{{fragment}}}",
        schema=schema,
        dependencies=_normalize_dependencies(typename, dependencies),
        scope=_normalize_scope(typename, scope),
        transform=transform,
    )


def create_dependency(
    typename: str,
    fragment: str,
    schema: Any,
    *,
    dependencies: Iterable[Dependency] | None = None,
    fragment_name: str | None = None,
    transform: Transform | None = None,
) -> Registration:
    """Register content that only appears nested inside other components."""
    return create_registration(
        typename,
        fragment,
        schema,
        dependencies=dependencies,
        fragment_name=fragment_name,
        transform=transform,
    )
