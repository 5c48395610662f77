import json
import logging
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../src")))

from novel_studio.document_store import DocumentStore
from novel_studio.storage import FileKeyValueStore, MemoryKeyValueStore, PersistenceAdapter


def _populated_store() -> DocumentStore:
    store = DocumentStore()
    first = store.create_chapter("Arrival", "The train was late.", number=1)
    store.create_chapter("Departure", "", number=2)
    store.create_character("Mara", "protagonist", "A locksmith", "patient", "left-handed")
    store.create_plot_point("The fire", "climax", "2", "Everything burns")
    store.update_settings(font_size="18", line_height="2")
    store.set_current_chapter(first.id)
    return store


def test_save_then_load_round_trips(tmp_path):
    adapter = PersistenceAdapter(FileKeyValueStore(str(tmp_path)))
    store = _populated_store()

    adapter.save(store)
    loaded = adapter.load()

    assert loaded == store
    assert loaded.to_dict() == store.to_dict()
    assert loaded.get_current_chapter().title == "Arrival"


def test_saved_blob_layout(tmp_path):
    kv = FileKeyValueStore(str(tmp_path))
    adapter = PersistenceAdapter(kv)
    store = _populated_store()

    adapter.save(store)

    blob = json.loads((tmp_path / "novelWriterData").read_text(encoding="utf-8"))
    assert set(blob) == {"chapters", "characters", "plotPoints", "settings", "currentChapterId"}
    assert blob["currentChapterId"] == store.current_chapter_id
    assert blob["chapters"][0]["lastModified"] == blob["chapters"][0]["createdAt"]
    assert blob["settings"] == {"fontSize": "18", "fontFamily": "'Georgia', serif", "lineHeight": "2"}
    assert kv.get("lastChapterId") == store.current_chapter_id


def test_load_without_saved_data_gives_defaults():
    loaded = PersistenceAdapter(MemoryKeyValueStore()).load()
    assert loaded == DocumentStore()
    assert loaded.settings.font_size == "16"


def test_load_with_corrupt_blob_gives_defaults():
    kv = MemoryKeyValueStore({"novelWriterData": "{not json", "lastChapterId": "abc"})
    loaded = PersistenceAdapter(kv).load()

    assert loaded.chapters == {}
    assert loaded.current_chapter_id is None


def test_load_with_non_object_blob_gives_defaults():
    kv = MemoryKeyValueStore({"novelWriterData": "[1, 2, 3]"})
    assert PersistenceAdapter(kv).load() == DocumentStore()


def test_load_fills_missing_collections():
    kv = MemoryKeyValueStore({"novelWriterData": json.dumps({"chapters": [{"id": "c1", "title": "Only"}]})})
    loaded = PersistenceAdapter(kv).load()

    assert list(loaded.chapters) == ["c1"]
    assert loaded.characters == {}
    assert loaded.plot_points == {}
    assert loaded.settings.font_family == "'Georgia', serif"


def test_last_chapter_slot_wins_over_blob_pointer():
    store = DocumentStore()
    first = store.create_chapter("First")
    second = store.create_chapter("Second")
    store.set_current_chapter(first.id)
    kv = MemoryKeyValueStore()
    adapter = PersistenceAdapter(kv)
    adapter.save(store)

    adapter.save_last_chapter_id(second.id)
    assert adapter.load().current_chapter_id == second.id

    adapter.save_last_chapter_id(None)
    assert adapter.load().current_chapter_id is None


def test_blob_pointer_used_when_last_chapter_slot_absent():
    store = DocumentStore()
    chapter = store.create_chapter("First")
    store.set_current_chapter(chapter.id)
    kv = MemoryKeyValueStore()
    adapter = PersistenceAdapter(kv)
    adapter.save(store)
    kv.remove("lastChapterId")

    assert adapter.load().current_chapter_id == chapter.id


def test_dangling_pointer_is_dropped_on_load():
    kv = MemoryKeyValueStore({
        "novelWriterData": json.dumps({"chapters": [], "currentChapterId": "gone"}),
        "lastChapterId": "gone",
    })
    assert PersistenceAdapter(kv).load().current_chapter_id is None


def test_clear_removes_both_slots(tmp_path):
    kv = FileKeyValueStore(str(tmp_path))
    adapter = PersistenceAdapter(kv)
    adapter.save(_populated_store())
    assert kv.keys() == ["lastChapterId", "novelWriterData"]

    adapter.clear()

    assert kv.get("novelWriterData") is None
    assert kv.get("lastChapterId") is None
    assert kv.keys() == []


def test_custom_slot_names():
    kv = MemoryKeyValueStore()
    adapter = PersistenceAdapter(kv, data_slot="draft", last_chapter_slot="draftLast")
    adapter.save(_populated_store())
    assert kv.keys() == ["draft", "draftLast"]


def test_file_store_overwrites_without_leftovers(tmp_path):
    kv = FileKeyValueStore(str(tmp_path / "nested"))
    kv.set("slot", "one")
    kv.set("slot", "two")

    assert kv.get("slot") == "two"
    assert os.listdir(tmp_path / "nested") == ["slot"]
    kv.remove("slot")
    kv.remove("slot")
    assert kv.get("slot") is None


def test_undecodable_blob_file_gives_defaults(tmp_path):
    (tmp_path / "novelWriterData").write_bytes(b"\xff\xfe\x00garbage")

    loaded = PersistenceAdapter(FileKeyValueStore(str(tmp_path))).load()

    assert loaded == DocumentStore()


def test_undecodable_last_chapter_file_falls_back_to_blob_pointer(tmp_path):
    kv = FileKeyValueStore(str(tmp_path))
    adapter = PersistenceAdapter(kv)
    store = DocumentStore()
    chapter = store.create_chapter("First")
    store.set_current_chapter(chapter.id)
    adapter.save(store)
    (tmp_path / "lastChapterId").write_bytes(b"\xff\xfe")

    loaded = adapter.load()

    assert list(loaded.chapters) == [chapter.id]
    assert loaded.current_chapter_id == chapter.id


def test_duplicate_ids_keep_later_entry_and_warn(caplog):
    kv = MemoryKeyValueStore({"novelWriterData": json.dumps({"chapters": [
        {"id": "a", "title": "First copy"},
        {"id": "b", "title": "Other"},
        {"id": "a", "title": "Second copy"},
    ]})})

    with caplog.at_level(logging.WARNING, logger="novel_studio.document_store"):
        loaded = PersistenceAdapter(kv).load()

    assert [c.title for c in loaded.chapters.values()] == ["Second copy", "Other"]
    assert "Duplicate Chapter id a" in caplog.text
