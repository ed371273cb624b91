import csv
import io
from datetime import date

from schema.template import TEMPLATE_HEADERS
from tests.factories import ClientFactory


def test_list_and_search(client, session):
    ClientFactory(first_name="Jane", last_name="Doe", email="jane@example.com")
    ClientFactory(first_name="John", last_name="Smith", status="lost")

    body = client.get("/api/v1/clients").json
    assert body["total"] == 2

    found = client.get("/api/v1/clients?q=doe").json
    assert [c["first_name"] for c in found["clients"]] == ["Jane"]

    lost = client.get("/api/v1/clients?status=lost").json
    assert [c["last_name"] for c in lost["clients"]] == ["Smith"]


def test_list_paginates(client, session):
    for _ in range(5):
        ClientFactory()
    body = client.get("/api/v1/clients?limit=2&offset=2").json
    assert body["total"] == 5
    assert len(body["clients"]) == 2
    assert (body["limit"], body["offset"]) == (2, 2)


def test_get_client(client, session):
    c = ClientFactory(first_name="Jane", effective_date=date(2024, 1, 15))
    body = client.get(f"/api/v1/clients/{c.id}").json
    assert body["first_name"] == "Jane"
    assert body["effective_date"] == "2024-01-15"
    assert client.get("/api/v1/clients/99999").status_code == 404


def test_filter_by_batch(client, session):
    ClientFactory(source_batch_id="a" * 32)
    ClientFactory()
    body = client.get(f"/api/v1/clients?batch={'a' * 32}").json
    assert body["total"] == 1


def test_export_matches_template_and_reimports_as_updates(client, session):
    ClientFactory(first_name="Jane", last_name="Doe", phone="5551112222",
                  effective_date=date(2024, 1, 15), carrier="Humana")
    ClientFactory(first_name="John", last_name="Smith", phone=None,
                  email="john@example.com")

    response = client.get("/api/v1/clients/export")
    assert response.status_code == 200
    rows = list(csv.reader(io.StringIO(response.get_data(as_text=True))))
    assert rows[0] == TEMPLATE_HEADERS
    assert len(rows) == 3
    assert rows[1][TEMPLATE_HEADERS.index("Effective Date")] == "01/15/2024"

    body = client.post("/api/v1/import", data=response.get_data(),
                       content_type="text/csv").json
    assert (body["created"], body["updated"], body["errors"]) == (0, 2, 0)


def test_schema_fields(client):
    body = client.get("/api/v1/schema/fields").json
    assert [f["key"] for f in body["groups"]["required"]] == ["firstName", "lastName"]
    assert "phone" in [f["key"] for f in body["groups"]["contact"]]
    assert body["status_values"] == ["active", "inactive", "lost", "churned"]


def test_bad_paging_params(client, session):
    for _ in range(3):
        ClientFactory()

    assert client.get("/api/v1/clients?limit=abc").status_code == 400
    assert client.get("/api/v1/clients?offset=x").status_code == 400
    assert client.get("/api/v1/imports?limit=ten").status_code == 400

    body = client.get("/api/v1/clients?limit=-1&offset=-5").json
    assert (body["limit"], body["offset"]) == (0, 0)
    assert body["clients"] == []
    assert body["total"] == 3
