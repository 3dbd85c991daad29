"""End-to-end sync tests against the in-memory spreadsheet."""

import json
from pathlib import Path

import pytest

from i18n_sheets.errors import KEY_COLLISION, MissingKeyColumn
from i18n_sheets.locale_files import LocaleFileStore
from i18n_sheets.sync import sync_to_json, sync_to_sheet


class TestSyncToJson:
    def test_writes_one_file_per_language_and_tab(self, tmp_path: Path, common_grid, make_backend) -> None:
        backend = make_backend({"common": common_grid, "errors": [["key", "en"], ["e404", "Not found"]]})
        sync_to_json(backend, LocaleFileStore(str(tmp_path)))

        vi = json.loads((tmp_path / "vi" / "common.json").read_text(encoding="utf-8"))
        assert vi == {"greeting": {"hello": "Xin chào", "bye": "Tạm biệt"}}
        assert (tmp_path / "en" / "errors.json").exists()
        assert not (tmp_path / "vi" / "errors.json").exists()

    def test_bad_table_aborts_before_writing(self, tmp_path: Path, common_grid, make_backend) -> None:
        backend = make_backend({"common": common_grid, "broken": [["id", "en"], ["a", "b"]]})
        with pytest.raises(MissingKeyColumn):
            sync_to_json(backend, LocaleFileStore(str(tmp_path / "locales")))
        assert not (tmp_path / "locales").exists()

    def test_recoverable_issues_collected(self, tmp_path: Path, issues, make_backend) -> None:
        backend = make_backend({"c": [["key", "en"], ["a", "1"], ["a", "2"]]})
        store = sync_to_json(backend, LocaleFileStore(str(tmp_path)), issues)
        assert store.get("en", "c").to_json() == {"a": "2"}
        assert len(issues.of_kind(KEY_COLLISION)) == 1


class TestSyncToSheet:
    def test_updates_each_category(self, tmp_path: Path, fake_backend) -> None:
        (tmp_path / "en").mkdir()
        (tmp_path / "de").mkdir()
        (tmp_path / "en" / "common.json").write_text('{"a": {"b": "AB"}, "c": "C"}', encoding="utf-8")
        (tmp_path / "de" / "common.json").write_text('{"c": "C-de"}', encoding="utf-8")
        (tmp_path / "de" / "extra.json").write_text('{"x": "X"}', encoding="utf-8")

        sync_to_sheet(fake_backend, LocaleFileStore(str(tmp_path)))
        assert fake_backend.updates == ["common", "extra"]
        assert fake_backend.grids["common"] == [["key", "de", "en"], ["c", "C-de", "C"], ["a.b", "", "AB"]]
        assert fake_backend.grids["extra"] == [["key", "de"], ["x", "X"]]

    def test_dry_run_leaves_sheet_alone(self, tmp_path: Path, fake_backend) -> None:
        (tmp_path / "en").mkdir()
        (tmp_path / "en" / "common.json").write_text('{"a": "A"}', encoding="utf-8")
        tables = sync_to_sheet(fake_backend, LocaleFileStore(str(tmp_path)), dry_run=True)
        assert [t.category for t in tables] == ["common"]
        assert fake_backend.updates == []


def test_round_trip_sheet_files_sheet(tmp_path: Path, common_grid, make_backend) -> None:
    backend = make_backend({"common": common_grid})
    files = LocaleFileStore(str(tmp_path), layout="flat")
    sync_to_json(backend, files)
    backend.grids.clear()
    sync_to_sheet(backend, files)
    assert backend.grids == {"common": common_grid}


def test_dotted_json_key_survives_files_sheet_files(tmp_path: Path, fake_backend) -> None:
    (tmp_path / "en").mkdir()
    (tmp_path / "en" / "common.json").write_text('{"errors.required": "Required", "ok": "OK"}', encoding="utf-8")
    files = LocaleFileStore(str(tmp_path))
    sync_to_sheet(fake_backend, files)
    assert fake_backend.grids["common"] == [["key", "en"], ["errors.required", "Required"], ["ok", "OK"]]

    sync_to_json(fake_backend, files)
    doc = json.loads((tmp_path / "en" / "common.json").read_text(encoding="utf-8"))
    assert doc == {"errors": {"required": "Required"}, "ok": "OK"}
