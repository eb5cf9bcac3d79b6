import base64

import pytest

from isbnkit.errors import RangeTableUnavailable
from isbnkit.main import app, get_range_table


def test_validate_isbn10(client):
    r = client.get("/validate", params={"isbn": "0-8044-2957-x"})
    assert r.status_code == 200
    assert r.json() == {
        "raw": "0-8044-2957-x",
        "normalized": "080442957X",
        "kind": "ISBN10",
        "valid": True,
        "outcome": "valid",
    }


@pytest.mark.parametrize("isbn,kind,outcome", [
    ("978-82-15-01538-4", "ISBN13", "checksum_mismatch"),
    ("1-2-3", "Unknown", "unknown_kind"),
])
def test_validate_reports_failure_kind(client, isbn, kind, outcome):
    data = client.get("/validate", params={"isbn": isbn}).json()
    assert data["valid"] is False
    assert data["kind"] == kind
    assert data["outcome"] == outcome


def test_validate_empty_input(client):
    r = client.get("/validate", params={"isbn": ""})
    assert r.status_code == 422
    assert r.json()["error"] == "InvalidInput"


def test_hyphenate(client):
    r = client.get("/hyphenate", params={"isbn": "9788215015385"})
    assert r.status_code == 200
    data = r.json()
    assert data["hyphenated"] == "978-82-15-01538-5"
    assert data["agency"] == "Norway"
    assert data["segments"]["registrant"] == "15"
    assert data["segments"]["publication"] == "01538"


def test_hyphenate_separator(client):
    r = client.get("/hyphenate", params={"isbn": "0-8044-2957-x", "separator": " "})
    assert r.json()["hyphenated"] == "0 8044 2957 X"
    assert r.json()["agency"] == "English language"


@pytest.mark.parametrize("isbn,error", [
    ("87-574-0845-8", "NotHyphenatable"),
    ("9786268533252", "NoMatchingRange"),
])
def test_hyphenate_failures(client, isbn, error):
    r = client.get("/hyphenate", params={"isbn": isbn})
    assert r.status_code == 422
    assert r.json()["error"] == error


def test_hyphenate_without_range_table(client):
    app.dependency_overrides[get_range_table] = lambda: None
    r = client.get("/hyphenate", params={"isbn": "9788215015385"})
    assert r.status_code == 503


def test_hyphenate_range_table_unavailable(client):
    def missing():
        raise RangeTableUnavailable("Missing range message RangeMessage.xml")

    app.dependency_overrides[get_range_table] = missing
    r = client.get("/hyphenate", params={"isbn": "9788215015385"})
    assert r.status_code == 503
    assert "RangeMessage.xml" in r.json()["detail"]


@pytest.mark.parametrize("digits,kind,check", [
    ("080442957", "ISBN10", "X"),
    ("978821501538", "ISBN13", "5"),
])
def test_check_digit(client, digits, kind, check):
    r = client.get("/check-digit", params={"digits": digits})
    assert r.status_code == 200
    assert r.json() == {"digits": digits, "kind": kind, "check_digit": check}


def test_check_digit_wrong_length(client):
    r = client.get("/check-digit", params={"digits": "12345"})
    assert r.status_code == 422
    assert r.json()["error"] == "UnsupportedLength"


def test_normalize_hyphenates_with_range_table(client):
    raw = "9788215015385;x\n0-8044-2957-x;y\n9786268533252;z\n".encode("utf-8")
    r = client.post("/normalize", files={"file": ("isbns.txt", raw, "text/plain")})
    assert r.status_code == 200
    data = r.json()

    out = base64.b64decode(data["normalized_csv"]["content_b64"]).decode("utf-8-sig")
    assert out.splitlines()[1:] == [
        "9788215015385,9788215015385,ISBN13,valid,978-82-15-01538-5",
        "0-8044-2957-x,080442957X,ISBN10,valid,0-8044-2957-X",
        "9786268533252,9786268533252,ISBN13,valid,",
    ]
    report = data["report"]
    assert report["normalizations"]["delimiter"]["detected"] == ";"
    assert report["summary"]["hyphenated"] == 2
    assert report["warnings"] == [{
        "row": 3,
        "column": "hyphenated",
        "issue": "no_matching_range",
        "value": "9786268533252",
        "action": "left_unhyphenated",
    }]


def test_normalize_rejects_other_files(client):
    r = client.post("/normalize", files={"file": ("isbns.pdf", b"%PDF", "application/pdf")})
    assert r.status_code == 422


@pytest.mark.parametrize("header", ["ISBN-13", "isbn10", "ISBN", "isbn_13"])
def test_normalize_skips_isbn_header(client, header):
    raw = f"{header}\n9788215015385\n".encode("utf-8")
    r = client.post("/normalize", files={"file": ("isbns.csv", raw, "text/csv")})
    report = r.json()["report"]
    assert report["summary"]["rows"] == 1
    assert report["errors"] == []
