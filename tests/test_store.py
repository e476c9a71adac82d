import pytest

from seocraft.models import ToolConfig
from seocraft.store import (
    CURRENT_TOOL_KEY,
    HISTORY_KEY,
    FileBackend,
    MemoryBackend,
    RedisBackend,
    ToolNotFound,
    ToolStore,
    customization_key,
)
from seocraft.themes import preset_theme


class FakeRedis:
    def __init__(self):
        self.data = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value

    def delete(self, key):
        self.data.pop(key, None)


def _config(title="Tool"):
    return ToolConfig.model_validate({"toolType": "meta", "title": title})


def _frozen_clock(value=1_700_000_000.0):
    return lambda: value


def test_add_and_load_round_trip(store):
    theme = preset_theme("playful", "meta", "Tool")
    entry = store.add_entry("meta tags please", _config(), theme)

    loaded, loaded_theme = store.load_tool(entry.id)
    assert loaded.prompt == "meta tags please"
    assert loaded.tool_config.tool_type == "meta"
    assert loaded_theme == theme
    assert store.current_tool_id() == entry.id


def test_history_is_capped_newest_first():
    store = ToolStore(MemoryBackend(), clock=_frozen_clock())
    ids = [store.add_entry(f"prompt {i}", _config(f"T{i}"), preset_theme("modern")).id for i in range(11)]

    history = store.history()
    assert len(history) == 10
    assert [e.id for e in history] == list(reversed(ids))[:10]
    assert [e.prompt for e in history][0] == "prompt 10"
    # the evicted tool's theme goes with it
    assert store.backend.get(customization_key(ids[0])) is None
    with pytest.raises(ToolNotFound):
        store.load_tool(ids[0])


def test_ids_are_unique_within_one_millisecond():
    store = ToolStore(MemoryBackend(), clock=_frozen_clock())
    a = store.add_entry("a", _config(), preset_theme("modern"))
    b = store.add_entry("b", _config(), preset_theme("modern"))
    assert a.id != b.id
    assert int(b.id) > int(a.id)


def test_not_found_messages(store):
    with pytest.raises(ToolNotFound) as exc:
        store.load_tool("123")
    assert str(exc.value) == "Tool not found"

    entry = store.add_entry("x", _config(), preset_theme("modern"))
    store.backend.delete(customization_key(entry.id))
    with pytest.raises(ToolNotFound) as exc:
        store.load_tool(entry.id)
    assert str(exc.value) == "Tool configuration not found"


def test_corrupt_values_are_treated_as_absent(store):
    store.backend.set(HISTORY_KEY, "{not json")
    assert store.history() == []
    store.backend.set(CURRENT_TOOL_KEY, "][")
    assert store.current_tool_id() is None


def test_unreadable_history_entries_are_skipped(store):
    good = store.add_entry("good", _config(), preset_theme("modern"))
    raw = store.load(HISTORY_KEY)
    store.save(HISTORY_KEY, [{"id": "broken"}] + raw)
    assert [e.id for e in store.history()] == [good.id]


def test_clear_history_keeps_theme_keys(store):
    entry = store.add_entry("x", _config(), preset_theme("modern"))
    store.clear_history()
    assert store.history() == []
    assert store.backend.get(customization_key(entry.id)) is not None


def test_save_theme_overwrites(store):
    entry = store.add_entry("x", _config(), preset_theme("modern"))
    store.save_theme(entry.id, preset_theme("playful"))
    _, theme = store.load_tool(entry.id)
    assert theme.ui_template == "playful"


def test_file_backend(tmp_path):
    backend = FileBackend(tmp_path / "store")
    assert backend.get("seoToolHistory") is None
    backend.set("seoToolHistory", "[]")
    assert backend.get("seoToolHistory") == "[]"
    assert not list((tmp_path / "store").glob("*.tmp"))
    backend.delete("seoToolHistory")
    backend.delete("seoToolHistory")
    assert backend.get("seoToolHistory") is None


def test_file_backed_store_survives_reopen(tmp_path):
    first = ToolStore(FileBackend(tmp_path))
    entry = first.add_entry("x", _config(), preset_theme("modern", "meta"))
    second = ToolStore(FileBackend(tmp_path))
    loaded, theme = second.load_tool(entry.id)
    assert loaded.id == entry.id
    assert theme.branding.primary_color == "#8B5CF6"


def test_redis_backend_prefixes_keys():
    fake = FakeRedis()
    store = ToolStore(RedisBackend(client=fake, prefix="t:"))
    entry = store.add_entry("x", _config(), preset_theme("modern"))
    assert "t:seoToolHistory" in fake.data
    assert f"t:{customization_key(entry.id)}" in fake.data
    assert store.current_tool_id() == entry.id
