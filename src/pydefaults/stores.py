"""Access to the preference store behind ``defaults``."""

from __future__ import annotations

import logging
import subprocess
from typing import Protocol

logger = logging.getLogger(__name__)

CommandOutput = tuple[int, str]


class PreferenceStore(Protocol):
    """Protocol describing the external reader/writer.

    ``read_type`` and ``read_value`` return the exit status and standard
    output of the probe; ``write`` returns the exit status.
    """

    def read_type(self, domain: str, key: str) -> CommandOutput:
        ...

    def read_value(self, domain: str, key: str) -> CommandOutput:
        ...

    def write(self, domain: str, key: str, type_tag: str, encoded: str) -> int:
        ...


class DefaultsCommand:
    """:class:`PreferenceStore` invoking the ``defaults`` executable.

    Arguments are passed as a list, never through a shell, so the encoded
    value always reaches ``defaults`` as a single token.
    """

    def __init__(self, executable: str = "defaults") -> None:
        self.executable = executable

    def _run(self, *args: str) -> subprocess.CompletedProcess[str]:
        argv = [self.executable, *args]
        logger.debug("running %s", argv)
        return subprocess.run(argv, capture_output=True, text=True, check=False)

    def read_type(self, domain: str, key: str) -> CommandOutput:
        proc = self._run("read-type", domain, key)
        return proc.returncode, proc.stdout

    def read_value(self, domain: str, key: str) -> CommandOutput:
        proc = self._run("read", domain, key)
        return proc.returncode, proc.stdout

    def write(self, domain: str, key: str, type_tag: str, encoded: str) -> int:
        proc = self._run("write", domain, key, f"-{type_tag}", encoded)
        if proc.returncode != 0:
            logger.debug("defaults write failed: %s", proc.stderr.strip())
        return proc.returncode


class InMemoryStore:
    """Dictionary backed :class:`PreferenceStore`.

    Output mimics the ``defaults`` tool: ``read-type`` prints
    ``Type is <tag>`` and ``read`` prints the stored text followed by a
    newline.  Missing entries exit with status 1.  Every write is appended to
    :attr:`writes` so callers can check whether a write happened.
    """

    def __init__(
        self, entries: dict[tuple[str, str], tuple[str, str]] | None = None
    ) -> None:
        self._entries: dict[tuple[str, str], tuple[str, str]] = dict(entries or {})
        self.writes: list[tuple[str, str, str, str]] = []

    def read_type(self, domain: str, key: str) -> CommandOutput:
        try:
            type_tag, _ = self._entries[(domain, key)]
        except KeyError:
            return 1, ""
        return 0, f"Type is {type_tag}\n"

    def read_value(self, domain: str, key: str) -> CommandOutput:
        try:
            _, raw = self._entries[(domain, key)]
        except KeyError:
            return 1, ""
        return 0, f"{raw}\n"

    def write(self, domain: str, key: str, type_tag: str, encoded: str) -> int:
        self.writes.append((domain, key, type_tag, encoded))
        # defaults stores booleans as 1/0 whatever spelling was written
        if type_tag == "boolean":
            encoded = "1" if encoded.upper() in ("YES", "TRUE", "1") else "0"
        self._entries[(domain, key)] = (type_tag, encoded)
        return 0

    def get(self, domain: str, key: str) -> tuple[str, str] | None:
        return self._entries.get((domain, key))
