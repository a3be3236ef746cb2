from .codecs import (
    CodecRegistry,
    default_registry,
    register_builtin_codecs,
    register_numeric_codecs,
)
from .errors import (
    DefaultsError,
    RegistryFrozenError,
    TypeInferenceError,
    UnknownTypeError,
    UnrepresentableValueError,
    WriteFailedError,
)
from .reader import CurrentState
from .reconcile import Outcome, PreferenceEntry, ReconciliationResult, Reconciler, reconcile
from .stores import DefaultsCommand, InMemoryStore

__all__ = [
    "CodecRegistry",
    "CurrentState",
    "DefaultsCommand",
    "DefaultsError",
    "InMemoryStore",
    "Outcome",
    "PreferenceEntry",
    "ReconciliationResult",
    "Reconciler",
    "RegistryFrozenError",
    "TypeInferenceError",
    "UnknownTypeError",
    "UnrepresentableValueError",
    "WriteFailedError",
    "default_registry",
    "reconcile",
    "register_builtin_codecs",
    "register_numeric_codecs",
]
