"""Tests for the site map writers."""

import csv
import json

import pytest

from sitemapper.urls import classify
from sitemapper.writers import FORMATS, output_path, write_csv, write_json, write_txt

SEED = classify("https://www.example.com", strict=True)


@pytest.fixture
def records():
    return [classify(u) for u in [
        "https://example.com/a",
        "https://example.com/b",
        "http://blog.example.com/post/1",
    ]]


class TestOutputPath:

    def test_named_after_seed_domain(self, tmp_path):
        assert output_path(SEED, "csv", tmp_path) == tmp_path / "site-map-example.csv"

    def test_defaults_to_cwd(self):
        assert str(output_path(SEED, "txt")) == "site-map-example.txt"


class TestWriters:
    """File contents for each format."""

    def test_csv(self, tmp_path, records):
        path = write_csv(records, SEED, tmp_path)

        assert path.name == "site-map-example.csv"
        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines[0] == "Url,Protocol,Subdomain,Domain,TLD,Path"
        assert lines[1] == "https://example.com/a,https,,example,.com,/a"
        assert lines[3] == "http://blog.example.com/post/1,http,blog.,example,.com,/post/1"

    def test_csv_uses_newline_terminator(self, tmp_path, records):
        path = write_csv(records, SEED, tmp_path)
        assert b"\r" not in path.read_bytes()

    def test_json(self, tmp_path, records):
        path = write_json(records, SEED, tmp_path)
        text = path.read_text(encoding="utf-8")

        assert text.endswith("]\n")
        assert text.startswith('[\n  {\n    "Url": "https://example.com/a",')
        data = json.loads(text)
        assert list(data[0]) == ["Url", "Protocol", "Subdomain", "Domain", "TLD", "Path"]
        assert data[2]["Subdomain"] == "blog."

    def test_txt(self, tmp_path, records):
        path = write_txt(records, SEED, tmp_path)
        assert path.read_text(encoding="utf-8") == (
            "https://example.com/a\nhttps://example.com/b\nhttp://blog.example.com/post/1\n"
        )

    def test_empty_outputs(self, tmp_path):
        assert write_csv([], SEED, tmp_path).read_text(encoding="utf-8") == "Url,Protocol,Subdomain,Domain,TLD,Path\n"
        assert json.loads(write_json([], SEED, tmp_path).read_text(encoding="utf-8")) == []
        assert write_txt([], SEED, tmp_path).read_text(encoding="utf-8") == ""

    def test_formats_agree(self, tmp_path, records):
        """TXT lines, the CSV Url column and the JSON Url fields list the same URLs in order."""
        txt = write_txt(records, SEED, tmp_path).read_text(encoding="utf-8").splitlines()
        with open(write_csv(records, SEED, tmp_path), newline="", encoding="utf-8") as fh:
            csv_urls = [row["Url"] for row in csv.DictReader(fh)]
        json_urls = [item["Url"] for item in json.loads(write_json(records, SEED, tmp_path).read_text(encoding="utf-8"))]

        assert txt == csv_urls == json_urls == [r.url for r in records]

    def test_io_error_propagates(self, tmp_path, records):
        missing = tmp_path / "does-not-exist"
        with pytest.raises(OSError):
            write_csv(records, SEED, missing)


class TestFormats:

    @pytest.mark.parametrize("code,labels", [
        ("a", ["CSV", "JSON", "TXT"]),
        ("c", ["CSV"]),
        ("j", ["JSON"]),
        ("t", ["TXT"]),
    ])
    def test_codes(self, code, labels):
        assert [label for label, _ in FORMATS[code]] == labels

    def test_unknown_code(self):
        assert "z" not in FORMATS
