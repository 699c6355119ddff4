from review_guesser.preferences import LAYOUT_KEY, MODE_KEY, PreferenceStore, coerce_layout, coerce_mode
from review_guesser.storage import MemoryStorage


def test_defaults():
    prefs = PreferenceStore()
    assert prefs.get_mode() == "balanced"
    assert prefs.get_layout() == "ranges"


def test_valid_values_round_trip():
    storage = MemoryStorage()
    prefs = PreferenceStore(storage)
    assert prefs.set_mode("raw") == "raw"
    assert prefs.set_layout("exact") == "exact"
    assert PreferenceStore(storage).get_mode() == "raw"
    assert PreferenceStore(storage).get_layout() == "exact"


def test_invalid_mode_is_coerced_before_persisting():
    storage = MemoryStorage()
    prefs = PreferenceStore(storage)
    prefs.set_mode("raw")
    assert prefs.set_mode("bogus") == "balanced"
    assert storage.get(MODE_KEY) == "balanced"
    assert prefs.get_mode() == "balanced"


def test_invalid_layout_is_coerced_before_persisting():
    storage = MemoryStorage()
    prefs = PreferenceStore(storage)
    assert prefs.set_layout(None) == "ranges"
    assert storage.get(LAYOUT_KEY) == "ranges"


def test_corrupted_storage_reads_default():
    storage = MemoryStorage({MODE_KEY: "RAW", LAYOUT_KEY: "{}"})
    prefs = PreferenceStore(storage)
    assert prefs.get_mode() == "balanced"
    assert prefs.get_layout() == "ranges"


def test_broken_storage(broken_storage):
    prefs = PreferenceStore(broken_storage)
    assert prefs.set_mode("raw") == "raw"
    assert prefs.get_mode() == "balanced"
    assert prefs.get_layout() == "ranges"


def test_coercion_helpers():
    assert coerce_mode("raw") == "raw"
    assert coerce_mode(3) == "balanced"
    assert coerce_layout("exact") == "exact"
    assert coerce_layout("Exact") == "ranges"
