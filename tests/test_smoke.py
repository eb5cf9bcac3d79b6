import base64

from fastapi.testclient import TestClient
from isbnkit.main import app

client = TestClient(app)

def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}

def test_normalize_latin1_list_without_range_table():
    # Include Latin-1 titles to force non-ASCII handling
    raw = "isbn,title\n87-574-0845-9,Montréal\n87-574-0845-8,Århus\n12345,Ødense\n".encode("latin-1")

    files = {"file": ("isbns.csv", raw, "text/csv")}
    r = client.post("/normalize", files=files)
    assert r.status_code == 200

    data = r.json()
    assert data["normalized_csv"]["encoding"] == "utf-8-sig"

    out_bytes = base64.b64decode(data["normalized_csv"]["content_b64"])
    # UTF-8 BOM bytes
    assert out_bytes.startswith(b"\xef\xbb\xbf")
    lines = out_bytes.decode("utf-8-sig").splitlines()
    assert lines[0] == "raw,normalized,kind,outcome,hyphenated"
    assert lines[1] == "87-574-0845-9,8757408459,ISBN10,valid,"

    summary = data["report"]["summary"]
    assert summary["rows"] == 3
    assert summary["valid"] == 1
    assert summary["hyphenated"] == 0
    assert [e["issue"] for e in data["report"]["errors"]] == ["checksum_mismatch", "unknown_length"]
    assert [e["row"] for e in data["report"]["errors"]] == [3, 4]
