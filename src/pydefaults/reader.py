from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

from .codecs import CodecRegistry
from .errors import UnknownTypeError
from .stores import PreferenceStore

logger = logging.getLogger(__name__)

_TYPE_RX = re.compile(r"Type is (\w+)")


@dataclass(frozen=True)
class CurrentState:
    """Observed type and value of one entry; ``None`` means absent."""

    type_tag: str | None = None
    value: Any | None = None

    @property
    def absent(self) -> bool:
        return self.value is None


def parse_type_output(stdout: str) -> str | None:
    """Return the tag from ``defaults read-type`` output, if any."""

    match = _TYPE_RX.search(stdout)
    return match.group(1) if match else None


def _strip_newline(stdout: str) -> str:
    if stdout.endswith("\r\n"):
        return stdout[:-2]
    if stdout.endswith("\n"):
        return stdout[:-1]
    return stdout


def read_current_state(
    store: PreferenceStore, domain: str, key: str, registry: CodecRegistry
) -> CurrentState:
    """Probe *store* for the declared type and value of ``domain``/``key``.

    Failed probes are not errors: they leave the corresponding field absent.
    """

    try:
        status, stdout = store.read_type(domain, key)
    except OSError as exc:
        logger.debug("read-type %s %s failed: %s", domain, key, exc)
        return CurrentState()
    type_tag = parse_type_output(stdout) if status == 0 else None
    if type_tag is None:
        return CurrentState()

    try:
        status, stdout = store.read_value(domain, key)
    except OSError as exc:
        logger.debug("read %s %s failed: %s", domain, key, exc)
        return CurrentState(type_tag)
    if status != 0:
        return CurrentState(type_tag)

    try:
        value = registry.decode(type_tag, _strip_newline(stdout))
    except UnknownTypeError:
        logger.debug("no codec for current type %s of %s %s", type_tag, domain, key)
        value = None
    return CurrentState(type_tag, value)
