"""
Loader tests: text trimming, numeric coercion, local and HTTP sources, and
the LoadError paths that stop a chart from rendering.
"""
import logging
import math

import pytest
import requests

import fetch_311_data
from fetch_311_data import LoadError, is_url, load_detailed, load_reasons, read_csv_source


# ── Local files ───────────────────────────────────────────────────────────────

def test_load_reasons_trims_and_coerces(reasons):
    assert reasons["reason"].tolist() == [
        "Street Cleaning", "Noise Disturbance", "Pothole", "Snow",
    ]
    assert reasons["Count"].tolist() == [1200, 200, 50, 10]


def test_load_detailed_keeps_file_order(detailed):
    assert len(detailed) == 6
    assert detailed["month_name"].tolist() == ["Jan", "Jan", "Mar", "Mar", "Feb", "Dec"]
    assert detailed["neighborhood"].tolist()[1] == "Roxbury"
    assert detailed["neighborhood"].tolist()[4] == ""
    assert detailed["month"].tolist()[-1] == 12
    assert detailed["count"].sum() == 35


def test_malformed_numeric_becomes_nan_and_is_logged(tmp_path, caplog):
    path = tmp_path / "bad.csv"
    path.write_text("reason,Count\nPothole,50\nSnow,lots\n", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="fetch_311_data"):
        df = load_reasons(str(path))
    assert df["Count"].iloc[0] == 50
    assert math.isnan(df["Count"].iloc[1])
    assert "1 malformed value(s)" in caplog.text


def test_header_only_file_gives_no_records(tmp_path):
    path = tmp_path / "empty_rows.csv"
    path.write_text("reason,Count\n", encoding="utf-8")
    assert load_reasons(str(path)).empty


# ── Failures ──────────────────────────────────────────────────────────────────

def test_missing_file_raises_load_error(tmp_path):
    missing = str(tmp_path / "nope.csv")
    with pytest.raises(LoadError) as exc:
        load_reasons(missing)
    assert exc.value.source == missing


def test_missing_columns_raise_load_error(tmp_path):
    path = tmp_path / "wrong.csv"
    path.write_text("reason,total\nPothole,1\n", encoding="utf-8")
    with pytest.raises(LoadError, match="missing column"):
        load_reasons(str(path))


def test_empty_file_raises_load_error(tmp_path):
    path = tmp_path / "blank.csv"
    path.write_text("", encoding="utf-8")
    with pytest.raises(LoadError, match="cannot parse"):
        load_detailed(str(path))


def test_non_utf8_file_raises_load_error(tmp_path):
    path = tmp_path / "latin1.csv"
    path.write_bytes("reason,Count\nCaf\xe9 noise,3\n".encode("latin-1"))
    with pytest.raises(LoadError, match="cannot decode") as exc:
        load_reasons(str(path))
    assert exc.value.source == str(path)


# ── HTTP sources ──────────────────────────────────────────────────────────────

class _FakeResponse:
    def __init__(self, text, status=200):
        self.text = text
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class _FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append(url)
        if self.error:
            raise self.error
        return self.response


def test_is_url():
    assert is_url("https://example.org/data.csv")
    assert is_url("HTTP://example.org/data.csv")
    assert not is_url("data/boston_311_detailed.csv")


def test_url_source_is_fetched_once(monkeypatch):
    fake = _FakeSession(_FakeResponse("reason,Count\nNoise,3\n"))
    monkeypatch.setattr(fetch_311_data, "SESSION", fake)
    df = read_csv_source("https://example.org/r.csv", numeric=["Count"], required=["Count"])
    assert df["Count"].tolist() == [3]
    assert fake.calls == ["https://example.org/r.csv"]


def test_http_error_raises_load_error(monkeypatch):
    fake = _FakeSession(_FakeResponse("not found", status=404))
    monkeypatch.setattr(fetch_311_data, "SESSION", fake)
    with pytest.raises(LoadError, match="request failed"):
        load_reasons("https://example.org/missing.csv")
    assert len(fake.calls) == 1


def test_network_error_raises_load_error(monkeypatch):
    fake = _FakeSession(error=requests.ConnectionError("offline"))
    monkeypatch.setattr(fetch_311_data, "SESSION", fake)
    with pytest.raises(LoadError):
        load_detailed("https://example.org/detailed.csv")
