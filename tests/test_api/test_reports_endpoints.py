from fastapi.testclient import TestClient

from a1saude.main import create_app

ROWS = [
    {"nome": "Ana", "cpf": "12345678901", "obs": "alta, retorno"},
    {"nome": "Rui & Filhos", "cpf": None, "obs": 3},
]


def test_export_csv(app_settings):
    with TestClient(create_app(app_settings)) as client:
        response = client.post("/api/v1/reports/export", json={"rows": ROWS, "format": "csv"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.headers["content-disposition"] == "attachment; filename=relatorio_Relatorio.csv"
    assert response.text == 'nome,cpf,obs\nAna,12345678901,"alta, retorno"\nRui & Filhos,,3'


def test_export_csv_masked_with_columns(app_settings):
    with TestClient(create_app(app_settings)) as client:
        response = client.post(
            "/api/v1/reports/export",
            json={"rows": ROWS, "columns": ["cpf", "nome"], "mask": True},
        )

    assert response.text == "cpf,nome\n123.456.789-**,Ana\n,Rui & Filhos"


def test_export_csv_empty(app_settings):
    with TestClient(create_app(app_settings)) as client:
        response = client.post("/api/v1/reports/export", json={"rows": [], "format": "csv"})

    assert response.status_code == 200
    assert response.text == ""


def test_export_xls(app_settings):
    with TestClient(create_app(app_settings)) as client:
        response = client.post(
            "/api/v1/reports/export",
            json={"rows": ROWS, "format": "xls", "sheetName": "Atendimentos"},
        )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/vnd.ms-excel")
    assert response.headers["content-disposition"] == "attachment; filename=relatorio_Atendimentos.xls"
    assert '<Worksheet ss:Name="Atendimentos">' in response.text
    assert "Rui &amp; Filhos" in response.text


def test_export_rejects_unknown_format(app_settings):
    with TestClient(create_app(app_settings)) as client:
        response = client.post("/api/v1/reports/export", json={"rows": [], "format": "pdf"})

    assert response.status_code == 422
