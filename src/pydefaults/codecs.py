"""Type codecs for preference values.

A codec pairs a *decode* function, turning the text printed by
``defaults read`` into a Python value, with an *encode* function turning a
Python value into the single argument passed to ``defaults write``.

Decoders return ``None`` when the text does not belong to their type; the
reconciler treats that as "no current value known".  Encoders raise
:class:`TypeError` when the value does not fit their type, which keeps an
empty encoding distinguishable from "could not encode".

Codecs are looked up by type tag.  The order in which tags are registered is
the order :meth:`CodecRegistry.infer_type` tries them, so specific types must
be registered before permissive ones.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Protocol

from .errors import (
    RegistryFrozenError,
    TypeInferenceError,
    UnknownTypeError,
    UnrepresentableValueError,
)

logger = logging.getLogger(__name__)

Decoder = Callable[[str], Any]
Encoder = Callable[[Any], str]

####################
##### ADAPTERS #####
####################

class TypeAdapter(Protocol):
    """Adapter for a single ``defaults`` value type."""

    def decode(self, raw: str) -> Any:
        """Parse *raw* text into a Python value or ``None`` if unrecognised."""

    def encode(self, value: Any) -> str:
        """Serialise *value* for ``defaults write``.

        Implementations raise :class:`TypeError` if *value* does not fit.
        """


class BooleanAdapter:
    """Adapter for ``-boolean`` values.

    ``defaults`` prints booleans as ``1``/``0`` but accepts ``YES``/``NO`` on
    write, so both spellings decode.  ``None`` encodes like ``False``.
    """

    TRUE_MARKERS = ("1", "YES")
    FALSE_MARKERS = ("0", "NO")

    def decode(self, raw: str) -> bool | None:
        if raw in self.TRUE_MARKERS:
            return True
        if raw in self.FALSE_MARKERS:
            return False
        return None

    def encode(self, value: Any) -> str:
        if value is True:
            return "YES"
        if value is False or value is None:
            return "NO"
        raise TypeError(f"expected bool, got {type(value).__name__}")


class StringAdapter:
    """Adapter for ``-string`` values."""

    def decode(self, raw: str) -> str:
        return raw

    def encode(self, value: Any) -> str:
        if isinstance(value, str):
            return value
        if isinstance(value, os.PathLike):
            return os.fspath(value)
        raise TypeError(f"expected str, got {type(value).__name__}")


class IntegerAdapter:
    """Adapter for ``-integer`` values."""

    def decode(self, raw: str) -> int | None:
        try:
            return int(raw.strip())
        except ValueError:
            return None

    def encode(self, value: Any) -> str:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"expected int, got {type(value).__name__}")
        return str(value)


class FloatAdapter:
    """Adapter for ``-float`` values."""

    def decode(self, raw: str) -> float | None:
        try:
            return float(raw.strip())
        except ValueError:
            return None

    def encode(self, value: Any) -> str:
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise TypeError(f"expected number, got {type(value).__name__}")
        try:
            return repr(float(value))
        except OverflowError as exc:
            raise TypeError(f"{value!r} is out of float range") from exc

####################
##### REGISTRY #####
####################

@dataclass(frozen=True)
class Codec:
    """A decode/encode pair registered under ``tag``."""

    tag: str
    decode: Decoder
    encode: Encoder


class CodecRegistry:
    """Ordered mapping of type tags to codecs.

    Registration replaces an existing codec for the same tag in place, so a
    replaced tag keeps its position in the inference order.  Once
    :meth:`freeze` has been called the registry is read-only and may be
    shared between threads without locking.
    """

    def __init__(self) -> None:
        self._codecs: dict[str, Codec] = {}
        self._frozen = False
        self._lock = Lock()

    # ---- registration ----

    def register(self, tag: str, decode: Decoder, encode: Encoder) -> None:
        if not isinstance(tag, str) or not tag:
            raise ValueError(f"invalid type tag: {tag!r}")
        with self._lock:
            if self._frozen:
                raise RegistryFrozenError(
                    f"cannot register {tag!r}: codec registry is frozen"
                )
            self._codecs[tag] = Codec(tag, decode, encode)
        logger.debug("registered codec %s", tag)

    def register_adapter(self, tag: str, adapter: TypeAdapter) -> None:
        self.register(tag, adapter.decode, adapter.encode)

    def freeze(self) -> None:
        with self._lock:
            self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ---- lookup ----

    def get(self, tag: str) -> Codec:
        try:
            return self._codecs[tag]
        except KeyError as exc:
            raise UnknownTypeError(
                f"unknown type: {tag!r}", type_tag=tag
            ) from exc

    def tags(self) -> list[str]:
        return list(self._codecs)

    def __contains__(self, tag: object) -> bool:
        return tag in self._codecs

    def __iter__(self) -> Iterator[Codec]:
        return iter(list(self._codecs.values()))

    def __len__(self) -> int:
        return len(self._codecs)

    # ---- conversion ----

    def decode(self, tag: str, raw: str) -> Any:
        """Decode *raw* under *tag*; ``None`` means the text was unrecognised."""

        return self.get(tag).decode(raw)

    def encode(self, tag: str, value: Any) -> str:
        codec = self.get(tag)
        try:
            return codec.encode(value)
        except TypeError as exc:
            raise UnrepresentableValueError(
                f"value {value!r} is not representable as {tag!r}: {exc}",
                type_tag=tag,
            ) from exc

    def infer_type(self, value: Any) -> str:
        """Return the first tag, in registration order, able to encode *value*."""

        logger.debug("Guessing defaults type for %r", value)
        for codec in self:
            try:
                codec.encode(value)
            except TypeError:
                continue
            return codec.tag
        raise TypeInferenceError(f"no registered type accepts {value!r}")


def register_builtin_codecs(registry: CodecRegistry) -> CodecRegistry:
    """Register the ``boolean`` and ``string`` codecs, in that order."""

    registry.register_adapter("boolean", BooleanAdapter())
    registry.register_adapter("string", StringAdapter())
    return registry


def register_numeric_codecs(registry: CodecRegistry) -> CodecRegistry:
    """Register the optional ``integer`` and ``float`` codecs."""

    registry.register_adapter("integer", IntegerAdapter())
    registry.register_adapter("float", FloatAdapter())
    return registry


_DEFAULT_REGISTRY: CodecRegistry | None = None
_DEFAULT_LOCK = Lock()


def default_registry() -> CodecRegistry:
    """Return the process-wide registry holding the built-in codecs."""

    global _DEFAULT_REGISTRY
    with _DEFAULT_LOCK:
        if _DEFAULT_REGISTRY is None:
            _DEFAULT_REGISTRY = register_builtin_codecs(CodecRegistry())
        return _DEFAULT_REGISTRY
