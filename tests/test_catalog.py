import json

from smpaudio.catalog import Catalog, CatalogEntry


def _write(tmp_path, content: str):
    path = tmp_path / "songs.json"
    path.write_text(content)
    return path


def test_resolve_normalizes_case_and_whitespace(catalog):
    entry = catalog.resolve("  CRADLES ")
    assert entry == CatalogEntry(url="http://x/cradles.mp3", title="Cradles")


def test_resolve_is_exact_match_only(catalog):
    assert catalog.resolve("cradle") is None
    assert catalog.resolve("cradles remix") is None
    assert catalog.resolve("") is None


def test_load_reads_songs_file(tmp_path):
    path = _write(tmp_path, json.dumps({
        "Cradles": {"url": "http://x/cradles.mp3", "title": "Cradles"},
        "other": {"url": "http://x/other.mp3"},
    }))
    catalog = Catalog.load(path)
    assert len(catalog) == 2
    assert "cradles" in catalog
    assert catalog.resolve("other").title == ""


def test_missing_file_gives_empty_catalog(tmp_path):
    catalog = Catalog.load(tmp_path / "nope.json")
    assert len(catalog) == 0
    assert catalog.resolve("anything") is None


def test_malformed_json_gives_empty_catalog(tmp_path):
    catalog = Catalog.load(_write(tmp_path, "{not json"))
    assert len(catalog) == 0


def test_non_object_top_level_gives_empty_catalog(tmp_path):
    catalog = Catalog.load(_write(tmp_path, '["a", "b"]'))
    assert len(catalog) == 0


def test_bad_entries_are_skipped(tmp_path):
    path = _write(tmp_path, json.dumps({
        "good": {"url": "http://x/good.mp3", "title": "Good"},
        "no_url": {"title": "Nothing"},
        "blank_url": {"url": "  "},
        "string": "http://x/str.mp3",
    }))
    catalog = Catalog.load(path)
    assert len(catalog) == 1
    assert catalog.resolve("good").url == "http://x/good.mp3"


def test_load_failure_is_recorded(tmp_path, errors_log):
    Catalog.load(tmp_path / "nope.json")
    assert '"stage": "catalog_load"' in errors_log.read_text()


def test_load_accepts_str_path(tmp_path):
    path = _write(tmp_path, json.dumps({"a": {"url": "http://x/a.mp3"}}))
    assert len(Catalog.load(str(path))) == 1
    assert len(Catalog.load(str(tmp_path / "missing.json"))) == 0
