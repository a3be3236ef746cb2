import pytest

from pydefaults.codecs import CodecRegistry, register_builtin_codecs
from pydefaults.reader import CurrentState, parse_type_output, read_current_state
from pydefaults.stores import InMemoryStore


class ScriptedStore:
    def __init__(self, type_result, value_result=(0, "")):
        self.type_result = type_result
        self.value_result = value_result
        self.value_reads = 0

    def read_type(self, domain, key):
        if isinstance(self.type_result, Exception):
            raise self.type_result
        return self.type_result

    def read_value(self, domain, key):
        self.value_reads += 1
        return self.value_result

    def write(self, domain, key, type_tag, encoded):  # pragma: no cover - unused
        raise AssertionError("reader must not write")


@pytest.fixture
def registry():
    return register_builtin_codecs(CodecRegistry())


def test_parse_type_output():
    assert parse_type_output("Type is boolean\n") == "boolean"
    assert parse_type_output("Type is string") == "string"
    assert parse_type_output("does not exist") is None
    assert parse_type_output("") is None


def test_reads_boolean(registry):
    store = InMemoryStore({("com.apple.dock", "autohide"): ("boolean", "1")})
    state = read_current_state(store, "com.apple.dock", "autohide", registry)
    assert state == CurrentState("boolean", True)
    assert not state.absent


def test_reads_string_without_trailing_newline(registry):
    store = InMemoryStore({("d", "k"): ("string", "hello ")})
    assert read_current_state(store, "d", "k", registry) == CurrentState("string", "hello ")


def test_missing_entry_is_absent(registry):
    state = read_current_state(InMemoryStore(), "d", "k", registry)
    assert state == CurrentState()
    assert state.absent


def test_failed_type_probe_skips_value_probe(registry):
    store = ScriptedStore((1, "Type is boolean"))
    assert read_current_state(store, "d", "k", registry) == CurrentState()
    assert store.value_reads == 0


def test_unparseable_type_output(registry):
    store = ScriptedStore((0, "garbage"))
    assert read_current_state(store, "d", "k", registry) == CurrentState()


def test_failed_value_probe_keeps_type(registry):
    store = ScriptedStore((0, "Type is string"), (1, "whatever"))
    assert read_current_state(store, "d", "k", registry) == CurrentState("string", None)


def test_unrecognised_boolean_text_is_absent(registry):
    store = ScriptedStore((0, "Type is boolean"), (0, "maybe\n"))
    state = read_current_state(store, "d", "k", registry)
    assert state.type_tag == "boolean"
    assert state.absent


def test_unregistered_current_type_is_absent(registry):
    store = ScriptedStore((0, "Type is dictionary"), (0, "{ a = 1; }\n"))
    assert read_current_state(store, "d", "k", registry) == CurrentState("dictionary", None)


def test_probe_oserror_is_absent(registry):
    store = ScriptedStore(FileNotFoundError("defaults"))
    assert read_current_state(store, "d", "k", registry) == CurrentState()
