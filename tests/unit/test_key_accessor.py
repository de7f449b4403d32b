import pytest

from storage_util.accessor import NO_POSTFIX, KeyAccessor, Postfix, SimpleAccessor
from storage_util.errors import StorageError, UnexpectedError
from storage_util.logs.formatter import SingleLineFormatter
from storage_util.storage.memory_backend import MemoryStorage
from tests.helpers import FailingStorage, FlakyReadStorage


@pytest.fixture
def profile(memory_storage, collector):
    return KeyAccessor("user:42", memory_storage, collector)


def test_save_then_load_round_trip(profile, collector):
    assert profile.save({"name": "Ann"}, "profile") is True
    assert profile.load("profile") == {"name": "Ann"}
    load = collector.last.details
    assert load.operation == "load"
    assert load.existance is True
    assert load.old_value == {"name": "Ann"}


def test_last_write_wins(profile, collector):
    profile.save("v1", Postfix("p"))
    profile.save("v2", Postfix("p"))
    first, second = collector.details
    assert first.existance is False
    assert first.old_value is None
    assert second.existance is True
    assert second.old_value == "v1"
    assert second.new_value == "v2"
    assert profile.load(Postfix("p")) == "v2"


def test_postfixes_are_independent(profile, memory_storage):
    profile.save(1, "a")
    profile.save(2, "b")
    profile.save(0, NO_POSTFIX)
    assert profile.load("a") == 1
    assert profile.load("b") == 2
    assert profile.load(None) == 0
    assert sorted(memory_storage.keys()) == ["app.user:42", "app.user:42.a", "app.user:42.b"]


def test_save_if_not_exist_keeps_original(profile, collector):
    assert profile.save_if_not_exist("first", "p") is True
    stored = collector.last.details
    assert stored.comment == "value saved"
    assert stored.existance is False
    assert stored.new_value == "first"
    assert stored.key_postfix == "p"

    assert profile.save_if_not_exist("second", "p") is True
    kept = collector.last.details
    assert kept.comment == "old value preserved"
    assert kept.existance is True
    assert kept.old_value == "first"
    assert kept.new_value is None
    assert profile.load("p") == "first"


def test_save_if_not_exist_overwrites_after_failed_read(collector):
    storage = FlakyReadStorage()
    acc = KeyAccessor("k", storage, collector)
    acc.save("old")
    storage.fail_reads = True
    assert acc.save_if_not_exist("new") is True
    details = collector.last.details
    assert details.comment == "value saved"
    assert details.error is None
    assert details.existance is True
    assert details.old_value == "old"
    assert storage.saves == 2


def test_delete_existing(profile, collector):
    profile.save({"name": "Ann"}, "profile")
    assert profile.delete("profile") is None
    deleted = collector.last.details
    assert deleted.operation == "delete"
    assert deleted.existance is True
    assert deleted.old_value == {"name": "Ann"}
    assert profile.load("profile") is None
    assert profile.is_exists("profile") is False


def test_delete_missing(profile, collector):
    profile.delete("nothing")
    deleted = collector.last.details
    assert deleted.existance is False
    assert deleted.error is None


def test_is_exists_logged_under_own_name(profile, collector):
    assert profile.is_exists("p") is False
    profile.save(5, "p")
    assert profile.is_exists("p") is True
    assert [d.operation for d in collector.details] == ["is exists", "save", "is exists"]


@pytest.mark.parametrize("present", [True, False])
def test_is_exists_matches_load(memory_storage, present):
    acc = KeyAccessor("k", memory_storage, log_handler=None)
    if present:
        acc.save("v")
    assert acc.is_exists() == (acc.load() is not None)


def test_is_exists_matches_load_on_error():
    acc = KeyAccessor("k", FailingStorage(), log_handler=None)
    assert acc.is_exists() is False
    assert acc.load() is None


def test_one_record_per_call(profile, collector):
    profile.save(1)
    profile.save_if_not_exist(2)
    profile.load()
    profile.is_exists()
    profile.delete()
    assert len(collector.records) == 5


def test_failing_backend(collector):
    acc = KeyAccessor("k", FailingStorage(), collector)

    assert acc.save("v", "p") is False
    assert isinstance(collector.last.details.error, StorageError)
    assert str(collector.last.details.error)

    assert acc.load("p") is None
    assert collector.last.details.existance is False
    assert collector.last.details.error is not None

    assert acc.delete("p") is None
    assert collector.last.details.error is not None

    assert acc.save_if_not_exist("v", "p") is False
    assert collector.last.details.comment is None
    assert collector.last.details.error is not None


def test_unexpected_errors_are_wrapped(collector):
    acc = KeyAccessor("k", FailingStorage(RuntimeError("socket closed")), collector)
    assert acc.save("v") is False
    error = collector.last.details.error
    assert isinstance(error, UnexpectedError)
    assert isinstance(error.cause, RuntimeError)


def test_value_type_mismatch_is_recorded(memory_storage, collector):
    writer = KeyAccessor("n", memory_storage, log_handler=None)
    writer.save("not a number")
    reader = KeyAccessor("n", memory_storage, collector, value_type=int)
    assert reader.load() is None
    assert isinstance(collector.last.details.error, StorageError)
    assert reader.is_exists() is False


def test_postfix_source_read_once(profile):
    class CountingSource:
        reads = 0

        @property
        def key_postfix(self):
            CountingSource.reads += 1
            return "p"

    profile.save(1, CountingSource())
    assert CountingSource.reads == 1


def test_end_to_end_scenario(collector):
    acc = KeyAccessor("user:42", MemoryStorage(), collector)
    fmt = SingleLineFormatter()

    assert acc.save({"name": "Ann"}, "profile") is True
    assert collector.last.full_key == "user:42.profile"
    assert fmt.format(collector.last).startswith("user:42.profile | SAVE | false")

    assert acc.load("profile") == {"name": "Ann"}
    assert acc.save_if_not_exist({"name": "Bob"}, "profile") is True
    assert acc.load("profile") == {"name": "Ann"}

    acc.delete("profile")
    assert collector.last.details.existance is True
    assert acc.load("profile") is None


def test_default_collaborators(collector):
    from storage_util import defaults

    storage = MemoryStorage(key_prefix="global")
    defaults.set_default_storage(storage)
    defaults.set_default_log_handler(collector)
    acc = KeyAccessor("k")
    assert acc.storage is storage
    acc.save(1)
    assert collector.last.full_key == "global.k"


def test_explicit_none_handler_disables_records(collector):
    from storage_util import defaults

    defaults.set_default_log_handler(collector)
    acc = KeyAccessor("k", MemoryStorage(), log_handler=None)
    acc.save(1)
    assert collector.records == []


def test_simple_accessor(memory_storage, collector):
    acc = SimpleAccessor("settings", memory_storage, collector)
    assert acc.is_exists() is False
    assert acc.save_if_not_exist({"theme": "dark"}) is True
    assert acc.save({"theme": "light"}) is True
    assert acc.load() == {"theme": "light"}
    acc.delete()
    assert acc.load() is None
    assert all(r.details.key_postfix is None for r in collector.records)
    assert collector.last.full_key == "app.settings"


class BrokenSource:
    @property
    def key_postfix(self):
        raise RuntimeError("postfix unavailable")


@pytest.mark.parametrize(
    "call, expected",
    [
        (lambda acc: acc.save(1, BrokenSource()), False),
        (lambda acc: acc.save_if_not_exist(1, BrokenSource()), False),
        (lambda acc: acc.load(BrokenSource()), None),
        (lambda acc: acc.delete(BrokenSource()), None),
        (lambda acc: acc.is_exists(BrokenSource()), False),
    ],
)
def test_failing_postfix_source_is_recorded(memory_storage, collector, call, expected):
    acc = KeyAccessor("k", memory_storage, collector)
    assert call(acc) is expected
    assert len(collector.records) == 1
    details = collector.last.details
    assert isinstance(details.error, UnexpectedError)
    assert isinstance(details.error.cause, RuntimeError)
    assert details.key_postfix is None
    assert memory_storage.keys() == []
