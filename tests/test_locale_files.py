"""Tests for reading and writing locale JSON documents."""

import json
from pathlib import Path

import pytest

from i18n_sheets.errors import INVALID_JSON_DOCUMENT, NON_OBJECT_JSON_DOCUMENT
from i18n_sheets.locale_files import LocaleFileStore
from i18n_sheets.tree import Branch, TranslationStore


def _sample_store() -> TranslationStore:
    store = TranslationStore()
    store.put("en", "common", Branch.from_json({"greeting": {"hello": "Hello", "bye": "Bye"}}))
    store.put("en", "errors", Branch.from_json({"e404": "Not found"}))
    store.put("vi", "common", Branch.from_json({"greeting": {"hello": "Xin chào", "bye": "Tạm biệt"}}))
    return store


class TestNestedLayout:
    def test_write_one_file_per_category(self, tmp_path: Path) -> None:
        files = LocaleFileStore(str(tmp_path / "locales"))
        written = files.write_translation_files(_sample_store())
        assert len(written) == 3
        text = (tmp_path / "locales" / "vi" / "common.json").read_text(encoding="utf-8")
        assert text == '{\n  "greeting": {\n    "hello": "Xin chào",\n    "bye": "Tạm biệt"\n  }\n}\n'

    def test_write_cleans_stale_files(self, tmp_path: Path) -> None:
        stale = tmp_path / "locales" / "fr" / "old.json"
        stale.parent.mkdir(parents=True)
        stale.write_text("{}", encoding="utf-8")
        LocaleFileStore(str(tmp_path / "locales")).write_translation_files(_sample_store())
        assert not stale.exists()

    def test_no_clean_keeps_stale_files(self, tmp_path: Path) -> None:
        stale = tmp_path / "locales" / "fr" / "old.json"
        stale.parent.mkdir(parents=True)
        stale.write_text("{}", encoding="utf-8")
        LocaleFileStore(str(tmp_path / "locales"), clean=False).write_translation_files(_sample_store())
        assert stale.exists()

    def test_dry_run_writes_nothing(self, tmp_path: Path) -> None:
        files = LocaleFileStore(str(tmp_path / "locales"), dry_run=True)
        written = files.write_translation_files(_sample_store())
        assert len(written) == 3
        assert not (tmp_path / "locales").exists()

    def test_read_back(self, tmp_path: Path) -> None:
        files = LocaleFileStore(str(tmp_path))
        files.write_translation_files(_sample_store())
        store = files.read_translation_files()
        assert store.languages() == ["en", "vi"]
        assert store.to_json() == _sample_store().to_json()

    def test_bad_documents_are_skipped(self, tmp_path: Path, issues) -> None:
        (tmp_path / "en").mkdir()
        (tmp_path / "en" / "good.json").write_text('{"a": "b"}', encoding="utf-8")
        (tmp_path / "en" / "broken.json").write_text('{"a": ', encoding="utf-8")
        (tmp_path / "en" / "list.json").write_text('["a"]', encoding="utf-8")
        (tmp_path / "en" / "notes.txt").write_text("ignored", encoding="utf-8")
        (tmp_path / "README.json").write_text("{}", encoding="utf-8")

        store = LocaleFileStore(str(tmp_path), issues=issues).read_translation_files()
        assert store.to_json() == {"en": {"good": {"a": "b"}}}
        assert len(issues.of_kind(INVALID_JSON_DOCUMENT)) == 1
        assert len(issues.of_kind(NON_OBJECT_JSON_DOCUMENT)) == 1

    def test_bom_is_tolerated(self, tmp_path: Path) -> None:
        (tmp_path / "en").mkdir()
        (tmp_path / "en" / "c.json").write_bytes('\ufeff{"a": "b"}'.encode("utf-8"))
        store = LocaleFileStore(str(tmp_path)).read_translation_files()
        assert store.get("en", "c").to_json() == {"a": "b"}

    def test_missing_directory_reads_empty(self, tmp_path: Path) -> None:
        store = LocaleFileStore(str(tmp_path / "nope")).read_translation_files()
        assert len(store) == 0

    def test_unsafe_category_not_written(self, tmp_path: Path) -> None:
        store = TranslationStore()
        store.put("en", "../escape", Branch.from_json({"a": "b"}))
        store.put("en", "ok", Branch.from_json({"a": "b"}))
        written = LocaleFileStore(str(tmp_path / "locales")).write_translation_files(store)
        assert written == [str(tmp_path / "locales" / "en" / "ok.json")]


class TestFlatLayout:
    def test_write_one_file_per_language(self, tmp_path: Path) -> None:
        LocaleFileStore(str(tmp_path), layout="flat").write_translation_files(_sample_store())
        doc = json.loads((tmp_path / "en.json").read_text(encoding="utf-8"))
        assert list(doc) == ["common", "errors"]
        assert doc["errors"] == {"e404": "Not found"}

    def test_read_back(self, tmp_path: Path) -> None:
        files = LocaleFileStore(str(tmp_path), layout="flat")
        files.write_translation_files(_sample_store())
        assert files.read_translation_files().to_json() == _sample_store().to_json()

    def test_non_object_category_skipped(self, tmp_path: Path, issues) -> None:
        (tmp_path / "en.json").write_text('{"common": {"a": "b"}, "title": "x"}', encoding="utf-8")
        store = LocaleFileStore(str(tmp_path), layout="flat", issues=issues).read_translation_files()
        assert store.categories("en") == ["common"]
        assert len(issues.of_kind(NON_OBJECT_JSON_DOCUMENT)) == 1

    def test_clean_removes_only_json(self, tmp_path: Path) -> None:
        (tmp_path / "fr.json").write_text("{}", encoding="utf-8")
        (tmp_path / "keep.txt").write_text("x", encoding="utf-8")
        LocaleFileStore(str(tmp_path), layout="flat").write_translation_files(_sample_store())
        assert not (tmp_path / "fr.json").exists()
        assert (tmp_path / "keep.txt").exists()


def test_unknown_layout() -> None:
    with pytest.raises(ValueError):
        LocaleFileStore("x", layout="tree")
