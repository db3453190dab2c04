import json
import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
requests = pytest.importorskip("requests")
pytest.importorskip("bs4")

from contentful_migrator.migration_tool import TableMigrationTool

HEADER = ["program-name", "url", "phone-number", "description", "key"]


def en(value):
    return {"en-US": value}


class FakeClient:
    def __init__(self):
        self.entries = {
            "src-inline": {
                "sys": {"id": "src-inline", "contentType": {"sys": {"id": "dataSourceTable"}}},
                "fields": {"dataTable": en({"tableData": [HEADER, ["A", "u", "p", "d", "food"]]})},
            },
        }

    def get_entries(self, content_type):
        if content_type == "tableOfContents":
            return [{"sys": {"id": "toc1"}, "fields": {"title": en("Contents")}}]
        return [
            {
                "sys": {"id": "tbl1"},
                "fields": {
                    "title": en("Resources"),
                    "source": en({"sys": {"id": "src-inline"}}),
                    "filters": en({"selectedColumns": [{"id": 0, "name": "program-name"}], "selectedKey": [{"id": 4, "name": "key"}]}),
                },
            },
            {"sys": {"id": "tbl2"}, "fields": {"title": en("Broken"), "source": en({"sys": {"id": "gone"}})}},
        ]

    def get_entry(self, entry_id):
        if entry_id not in self.entries:
            raise requests.ConnectionError(f"cannot reach {entry_id}")
        return self.entries[entry_id]


@pytest.fixture
def tool(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    t = TableMigrationTool({"migration": {"out_dir": str(tmp_path / "out")}})
    t._client = FakeClient()
    return t


def test_config_defaults(monkeypatch, tmp_path):
    monkeypatch.setenv("WP_BASE_URL", "https://wp.example")
    monkeypatch.delenv("CONTENTFUL_ENVIRONMENT_ID", raising=False)
    t = TableMigrationTool(config_file=str(tmp_path / "missing.json"))
    assert t.config["contentful"]["environment_id"] == "master"
    assert t.config["wordpress"]["base_url"] == "https://wp.example"
    assert t.config["migration"]["erase_key_when_unfiltered"] is True
    assert t.config["migration"]["dry_run"] is False


def test_extract_tables_continues_after_a_failure(tool, tmp_path):
    stats = tool.extract_tables()
    assert stats == {"total": 2, "success": 1, "inline": 1, "spreadsheet": 0, "failed": 1}

    with open(tmp_path / "out" / "tbl1.json", encoding="utf-8") as f:
        data = json.load(f)
    assert data["rawData"] == [["program-name", "key"], ["A", "food"]]
    assert data["keyColumnIndex"] == 1

    with open(tmp_path / "reports" / "migration" / "errors.jsonl", encoding="utf-8") as f:
        errors = [json.loads(line) for line in f]
    assert errors[0]["code"] == "CONTENTFUL_NETWORK"
    assert errors[0]["id"] == "tbl2"


def test_dry_run_writes_nothing(tool, tmp_path):
    tool.config["migration"]["dry_run"] = True
    assert tool.extract_tables()["success"] == 1
    assert tool.extract_tocs() == 1
    assert not (tmp_path / "out").exists()


def test_install_and_render_from_artifacts(tool, tmp_path):
    tool.extract_tables()
    tool.extract_tocs()
    copied = tool.install(str(tmp_path / "plugin"))
    assert sorted(os.path.basename(p) for p in copied) == ["tbl1.json", "toc1.json"]

    html = tool.shortcode_renderer().do_shortcodes('[contentful_table id="tbl1" key="food-help"]')
    assert "<td>A</td>" in html
    assert "food" not in html.split("<tbody>")[1]


class MixedClient(FakeClient):
    def get_entries(self, content_type):
        return [
            {
                "sys": {"id": "bad-filters"},
                "fields": {
                    "title": en("Bad filters"),
                    "source": en({"sys": {"id": "src-inline"}}),
                    "filters": en({"selectedColumns": ["program-name"]}),
                },
            },
            {"sys": {"id": "broken-source"}, "fields": {"source": en({"sys": {"id": "explodes"}})}},
            {"sys": {"id": "good"}, "fields": {"source": en({"sys": {"id": "src-inline"}})}},
        ]

    def get_entry(self, entry_id):
        if entry_id == "explodes":
            raise ValueError("unexpected payload")
        return super().get_entry(entry_id)


def test_malformed_entries_do_not_stop_the_run(tool, tmp_path):
    tool._client = MixedClient()
    stats = tool.extract_tables()
    assert stats["total"] == 3
    assert stats["success"] == 2
    assert stats["failed"] == 1

    with open(tmp_path / "out" / "bad-filters.json", encoding="utf-8") as f:
        data = json.load(f)
    assert data["rawData"][0] == HEADER
    assert data["keyColumnIndex"] == -1
    assert (tmp_path / "out" / "good.json").exists()

    with open(tmp_path / "reports" / "migration" / "errors.jsonl", encoding="utf-8") as f:
        errors = [json.loads(line) for line in f]
    assert [(e["code"], e["id"]) for e in errors] == [("TABLE_EXTRACT", "broken-source")]


def test_install_into_the_output_directory_is_skipped(tool, tmp_path):
    tool.config["migration"]["wp_tables_dir"] = str(tmp_path / "out")
    tool.extract_tables()
    assert tool.install() == []
    assert (tmp_path / "out" / "tbl1.json").exists()
