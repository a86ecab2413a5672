"""
Tests for the upload API.
"""
import json

import pytest
from fastapi.testclient import TestClient

from app.api import app

CONTENT = (
    "data,valor,descricao,categoria,tipo\n"
    "2024-01-01,100.50,Compra supermercado,Alimentacao,DESPESA\n"
    "2024-01-02,,Sem valor,Categoria,RECEITA\n"
).encode()


@pytest.fixture
def client():
    return TestClient(app)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_preview_csv(client):
    response = client.post(
        "/api/imports/preview",
        files={"file": ("extrato.csv", CONTENT, "text/csv")},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["source_format"] == "delimited_text"
    assert body["candidates_extracted"] == 1
    assert body["candidates"][0]["amount"] == "100.50"
    assert body["candidates"][0]["date"] == "2024-01-01"
    assert body["errors"][0]["row_number"] == 2
    assert body["errors"][0]["field"] == "amount"
    assert body["summary"] == "1 of 2 rows imported, 0 duplicates, 1 errors"


def test_preview_with_existing_transactions(client):
    existing = [{
        "id": 42,
        "date": "2024-01-01",
        "amount": "100.50",
        "description": "Compra supermercado",
        "category": "Alimentacao",
    }]

    response = client.post(
        "/api/imports/preview",
        files={"file": ("extrato.csv", CONTENT, "text/csv")},
        data={"existing": json.dumps(existing)},
    )

    assert response.status_code == 200
    duplicates = response.json()["duplicates"]
    assert len(duplicates) == 1
    assert duplicates[0]["existing"]["id"] == "42"
    assert duplicates[0]["score"] == 1.0


def test_empty_file_rejected(client):
    response = client.post(
        "/api/imports/preview",
        files={"file": ("extrato.csv", b"", "text/csv")},
    )

    assert response.status_code == 400


def test_unsupported_format_rejected(client):
    response = client.post(
        "/api/imports/preview",
        files={"file": ("extrato.pdf", b"%PDF-1.4", "application/pdf")},
    )

    assert response.status_code == 415
    assert "Unsupported" in response.json()["detail"]["message"]


def test_malformed_existing_rejected(client):
    response = client.post(
        "/api/imports/preview",
        files={"file": ("extrato.csv", CONTENT, "text/csv")},
        data={"existing": "[{\"id\": \"x\"}"},
    )

    assert response.status_code == 422
