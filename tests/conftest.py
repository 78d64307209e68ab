import pytest

from smpaudio.catalog import Catalog, CatalogEntry
from smpaudio.station import Station

SECRET = "s3cret"


@pytest.fixture
def catalog():
    return Catalog({
        "cradles": CatalogEntry(url="http://x/cradles.mp3", title="Cradles"),
        "untitled": CatalogEntry(url="http://x/untitled.mp3"),
    })


@pytest.fixture
def station(catalog):
    return Station(catalog, secret=SECRET)


@pytest.fixture
def open_station(catalog):
    return Station(catalog, secret="")


@pytest.fixture(autouse=True)
def errors_log(tmp_path, monkeypatch):
    """Keep structured error records out of the project tree."""
    from smpaudio import errors
    monkeypatch.setattr(errors, "OUTPUT_DIR", tmp_path)
    monkeypatch.setattr(errors, "ERRORS_LOG", tmp_path / "errors.log")
    return tmp_path / "errors.log"
