# mips_asm/tests/test_app.py
import pytest
from mips_asm.app import app


@pytest.fixture
def client():
    """Provides a Flask test client for each test."""
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


def test_ping(client):
    response = client.get("/api/ping")
    assert response.status_code == 200
    assert response.get_json() == {"message": "pong"}


def test_assemble_endpoint(client):
    response = client.post("/api/assemble", json={"assembly": "add $3, $1, $2\nlw $4, 4($3)"})
    assert response.status_code == 200
    data = response.get_json()
    assert not data["errors"]
    assert [w["hex"] for w in data["machine_code"]] == ["0x00221820", "0x8c640004"]
    assert data["binary"] == "002218208c640004"


def test_assemble_endpoint_reports_errors(client):
    response = client.post("/api/assemble", json={"assembly": ".word nowhere"})
    assert response.status_code == 400
    data = response.get_json()
    assert data["machine_code"] == []
    assert data["errors"][0]["kind"] == "UndefinedLabel"
    assert data["errors"][0]["line"] == 1


def test_assemble_endpoint_symbol_table(client):
    response = client.post("/api/assemble", json={"assembly": "top: jr $31\nend: .word top"})
    assert response.get_json()["symbol_table"] == {"top": 0, "end": 4}


@pytest.mark.parametrize("body", [{}, {"code": "jr $31"}, {"assembly": 5}, ["jr $31"], "jr $31", 7])
def test_missing_assembly_key(client, body):
    response = client.post("/api/assemble", json=body)
    assert response.status_code == 400
    assert "Missing 'assembly'" in response.get_json()["errors"][0]["message"]


def test_tokenize_endpoint(client):
    response = client.post("/api/tokenize", json={"assembly": "L: .word 0x10"})
    assert response.status_code == 200
    tokens = response.get_json()["lines"][0]["tokens"]
    assert [t["kind"] for t in tokens] == ["LABEL", "DOTWORD", "HEXINT"]


def test_tokenize_endpoint_lexical_error(client):
    response = client.post("/api/tokenize", json={"assembly": "jr $31\nadd #"})
    assert response.status_code == 400
    error = response.get_json()["errors"][0]
    assert error["kind"] == "LexicalError"
    assert error["line"] == 2


def test_export_binary(client):
    response = client.post("/api/export/binary", json={"assembly": ".word 0x1\n.word -1"})
    assert response.status_code == 200
    assert response.mimetype == "application/octet-stream"
    assert response.data == b"\x00\x00\x00\x01\xff\xff\xff\xff"
    assert "program.bin" in response.headers["Content-Disposition"]


def test_export_binary_error(client):
    response = client.post("/api/export/binary", json={"assembly": "jr $1\njr $1, $2"})
    assert response.status_code == 400
    assert response.get_json()["errors"][0]["kind"] == "MalformedOperands"


def test_app_imports_with_bad_port_setting(monkeypatch):
    import importlib
    import mips_asm.app as app_module
    monkeypatch.setenv("MIPS_ASM_PORT", "not-a-port")
    reloaded = importlib.reload(app_module)
    assert reloaded.app.test_client().get("/api/ping").status_code == 200
