from __future__ import annotations

"""Registry of top-level components and the operations built on it."""

import asyncio
from collections.abc import Iterable, Mapping
from typing import Any

from pigeon.config import Settings, get_settings
from pigeon.errors import RegistrationError, UnknownTypenameError
from pigeon.fragments import inline_fragments, render_fragments
from pigeon.logger import get_logger
from pigeon.registration import Registration

TYPENAME_KEY = "__typename"


class Pigeon:
    """A set of registered components.

    Components are kept in registration order. When two registrations share a
    typename both fragments are emitted, but the latest one is used to
    validate records of that typename.
    """

    def __init__(
        self,
        components: Iterable[Registration] | None = None,
        *,
        parent: Pigeon | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._registrations: list[Registration] = []
        self._parent = parent
        self.settings = settings or get_settings()
        self.logger = get_logger("instance")
        if components:
            self.register(*components)

    def register(self, *registrations: Registration) -> Pigeon:
        for registration in registrations:
            if not isinstance(registration, Registration):
                raise RegistrationError(
                    f"expected a Registration, got {type(registration).__name__}"
                )
            self._registrations.append(registration)
            self.logger.debug(
                "REGISTER typename=%s fragment_name=%s scope=%s",
                registration.typename,
                registration.fragment_name,
                ",".join(registration.scope),
            )
        return self

    @property
    def registrations(self) -> tuple[Registration, ...]:
        return tuple(self._registrations)

    @property
    def components(self) -> dict[str, Registration]:
        return {registration.typename: registration for registration in self._registrations}

    def resolve(self, typename: str) -> Registration | None:
        """Find a registration by typename, falling back to the parent registry."""
        registration = self.components.get(typename)
        if registration is None and self._parent is not None:
            return self._parent.resolve(typename)
        return registration

    def scope(self, name: str) -> Pigeon:
        """Instance limited to the components registered under ``name``."""
        scoped = [registration for registration in self._registrations if registration.in_scope(name)]
        self.logger.debug("SCOPE name=%s components=%s", name, len(scoped))
        return Pigeon(scoped, parent=self, settings=self.settings)

    def fragments(self) -> str:
        return render_fragments(self._registrations, self.resolve)

    def query(self) -> str:
        return inline_fragments(self._registrations)

    def _select(self, records: Iterable[Any]) -> list[tuple[int, Registration, Any]]:
        components = self.components
        selected: list[tuple[int, Registration, Any]] = []
        for index, record in enumerate(records):
            typename = record.get(TYPENAME_KEY) if isinstance(record, Mapping) else None
            registration = components.get(typename) if isinstance(typename, str) else None
            if registration is None:
                if not self.settings.drop_unknown:
                    raise UnknownTypenameError(typename, index)
                self.logger.info("VALIDATE DROP index=%s typename=%s", index, typename)
                continue
            selected.append((index, registration, record))
        return selected

    async def validate(self, records: Iterable[Any]) -> list[Any]:
        """Validate and transform CMS records, one schema per ``__typename``.

        Unregistered records are dropped. Kept records are validated
        concurrently and returned in input order; the first invalid record
        raises :class:`~pigeon.errors.ContentValidationError`.
        """
        records = list(records)
        selected = self._select(records)
        tasks = [
            asyncio.ensure_future(registration.parse_async(record, index=index))
            for index, registration, record in selected
        ]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            # Stop the remaining transforms before the failure propagates.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        self.logger.info("VALIDATE DONE received=%s kept=%s", len(records), len(results))
        return list(results)

    def validate_sync(self, records: Iterable[Any]) -> list[Any]:
        """Blocking variant of :meth:`validate` for code without an event loop."""
        return asyncio.run(self.validate(records))


def create_pigeon(components: Iterable[Registration] | None = None) -> Pigeon:
    return Pigeon(components)
