"""Idempotent reconciliation of a single preference entry.

:class:`Reconciler` reads the current state of an entry, compares it with the
desired state and issues a single ``defaults write`` only when they differ.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any

from .codecs import CodecRegistry, default_registry
from .errors import ReconcileError, WriteFailedError
from .reader import CurrentState, read_current_state
from .stores import DefaultsCommand, PreferenceStore

logger = logging.getLogger("pydefaults")


@dataclass(frozen=True)
class PreferenceEntry:
    """Desired state of one preference.

    ``type`` may be omitted, in which case the current type is reused or one
    is inferred from ``value``.
    """

    domain: str
    key: str
    value: Any = None
    type: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.domain, str) or not self.domain:
            raise ValueError(f"invalid domain: {self.domain!r}")
        if not isinstance(self.key, str) or not self.key:
            raise ValueError(f"invalid key: {self.key!r}")
        if self.type is not None and (not isinstance(self.type, str) or not self.type):
            raise ValueError(f"invalid type: {self.type!r}")

    def __str__(self) -> str:
        return f"defaults[{self.domain} {self.key}]"


class Outcome(enum.Enum):
    NOOP = "noop"
    APPLIED = "applied"
    PLANNED = "planned"


@dataclass(frozen=True)
class ReconciliationResult:
    changed: bool
    outcome: Outcome
    type_tag: str | None = None
    encoded: str | None = None
    current: CurrentState = field(default_factory=CurrentState)


def _same_value(current: Any, desired: Any) -> bool:
    # 0 == False in Python; a match requires the same kind of value
    return type(current) is type(desired) and current == desired


class Reconciler:
    """Bring entries of a :class:`PreferenceStore` in line with desired state.

    The registry is frozen on first use; register extra codecs before
    constructing the reconciler.
    """

    def __init__(
        self,
        store: PreferenceStore | None = None,
        registry: CodecRegistry | None = None,
    ) -> None:
        self.store = store if store is not None else DefaultsCommand()
        self.registry = registry if registry is not None else default_registry()

    def current_state(self, entry: PreferenceEntry) -> CurrentState:
        return read_current_state(self.store, entry.domain, entry.key, self.registry)

    def is_current(self, entry: PreferenceEntry, current: CurrentState) -> bool:
        """Return True when *current* already matches *entry*.

        An absent current value never matches, whatever is desired.  The
        desired value is compared in its decoded form, so a path matches the
        string it encodes to.
        """

        if current.absent or entry.value is None:
            return False
        desired_type = entry.type if entry.type is not None else current.type_tag
        if desired_type != current.type_tag:
            return False
        try:
            desired = self.registry.decode(
                desired_type, self.registry.encode(desired_type, entry.value)
            )
        except ReconcileError:
            return False
        return _same_value(current.value, desired)

    def resolve_type(self, entry: PreferenceEntry, current: CurrentState) -> str:
        if entry.type is not None:
            return entry.type
        if current.type_tag is not None:
            return current.type_tag
        return self.registry.infer_type(entry.value)

    def plan(self, entry: PreferenceEntry) -> ReconciliationResult:
        """Return what :meth:`reconcile` would do, without writing."""

        return self.reconcile(entry, dry_run=True)

    def reconcile(
        self, entry: PreferenceEntry, *, dry_run: bool = False
    ) -> ReconciliationResult:
        self.registry.freeze()
        current = self.current_state(entry)

        if self.is_current(entry, current):
            logger.debug("Skipping %s since the value is already set", entry)
            return ReconciliationResult(
                False, Outcome.NOOP, type_tag=current.type_tag, current=current
            )

        try:
            type_tag = self.resolve_type(entry, current)
            encoded = self.registry.encode(type_tag, entry.value)
        except ReconcileError as exc:
            exc.domain = entry.domain
            exc.key = entry.key
            if exc.type_tag is None:
                exc.type_tag = entry.type or current.type_tag
            raise

        if dry_run:
            logger.info("Would write %s as -%s %r", entry, type_tag, encoded)
            return ReconciliationResult(
                True, Outcome.PLANNED, type_tag=type_tag, encoded=encoded, current=current
            )

        context = {"domain": entry.domain, "key": entry.key, "type_tag": type_tag}
        try:
            status = self.store.write(entry.domain, entry.key, type_tag, encoded)
        except OSError as exc:
            raise WriteFailedError(f"failed to write {entry}: {exc}", **context) from exc
        if status != 0:
            raise WriteFailedError(
                f"writing {entry} exited with status {status}", status=status, **context
            )

        logger.info("Ran %s successfully", entry)
        return ReconciliationResult(
            True, Outcome.APPLIED, type_tag=type_tag, encoded=encoded, current=current
        )


def reconcile(
    entry: PreferenceEntry,
    *,
    store: PreferenceStore | None = None,
    registry: CodecRegistry | None = None,
    dry_run: bool = False,
) -> ReconciliationResult:
    """Reconcile *entry* with a one-off :class:`Reconciler`."""

    return Reconciler(store, registry).reconcile(entry, dry_run=dry_run)
