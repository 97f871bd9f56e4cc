from __future__ import annotations

"""Fragment collection and selection-set rendering."""

from collections.abc import Callable, Iterable

from pigeon.errors import UnknownDependencyError
from pigeon.logger import get_logger
from pigeon.registration import Registration

Resolver = Callable[[str], "Registration | None"]

logger = get_logger("fragments")


def _no_resolver(typename: str) -> Registration | None:
    return None


def collect_fragments(
    registrations: Iterable[Registration],
    resolve: Resolver = _no_resolver,
) -> list[Registration]:
    """Walk dependencies depth-first and return each fragment once.

    Dependencies come before the registrations that spread them. Typename
    dependencies are looked up with ``resolve``.
    """
    ordered: list[Registration] = []
    seen: set[str] = set()

    def visit(registration: Registration) -> None:
        if registration.fragment_name in seen:
            return
        # Mark before descending so cyclic declarations terminate.
        seen.add(registration.fragment_name)
        for dependency in registration.dependencies:
            if isinstance(dependency, str):
                resolved = resolve(dependency)
                if resolved is None:
                    raise UnknownDependencyError(dependency, registration.typename)
                dependency = resolved
            visit(dependency)
        ordered.append(registration)

    for registration in registrations:
        visit(registration)

    logger.debug(
        "FRAGMENTS COLLECTED count=%s names=%s",
        len(ordered),
        ",".join(item.fragment_name for item in ordered),
    )
    return ordered


def render_fragments(
    registrations: Iterable[Registration],
    resolve: Resolver = _no_resolver,
) -> str:
    """Fragment definitions for the registrations and everything they depend on."""
    return "\n".join(item.fragment for item in collect_fragments(registrations, resolve))


def inline_fragments(registrations: Iterable[Registration]) -> str:
    """Inline-fragment selections for a polymorphic field, top level only."""
    lines: list[str] = []
    seen: set[str] = set()
    for registration in registrations:
        if registration.fragment_name in seen:
            continue
        seen.add(registration.fragment_name)
        lines.append(registration.inline_fragment())
    return "\n".join(lines)
