from datetime import date

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from db.models import Client, ImportBatch, SavedMapping
from import_engine.errors import ImportFileError, ValidationError
from services.batch_service import BatchService
from services.mapping_service import MappingService
from services.import_service import preview_import, run_import
from tests.factories import ClientFactory

HEADER = "First Name,Last Name,Phone,Email,Effective Date,Carrier,Status\n"


def _csv(*lines: str) -> str:
    return HEADER + "\n".join(lines) + "\n"


def _count(session, model=Client):
    return session.scalar(select(func.count()).select_from(model))


def test_ten_row_upload_counts(session):
    ClientFactory(phone="5550000003", carrier="Aetna")
    content = _csv(
        "Ann,One,555-000-0001,ann@example.com,01/01/2024,Humana,active",
        "Bob,Two,555-000-0002,,01/02/2024,Humana,active",
        "Cat,Three,(555) 000-0003,,01/03/2024,Humana,active",   # existing phone
        ",,555-000-0004,nobody@example.com,01/04/2024,Humana,active",
        "Dan,Four,555-000-0005,,01/05/2024,Humana,inactive",
        "Eve,Five,555-000-0006,,01/06/2024,Humana,active",
        ",,555-000-0007,,,,",
        "Fay,Six,555-000-0008,,01/08/2024,Humana,lost",
        "Gus,Seven,,gus@example.com,01/09/2024,Humana,active",
        "Hal,Eight,555-000-0010,,01/10/2024,Humana,churned",
    )

    report = run_import(content, filename="book.csv")

    assert report.total_rows == 10
    assert (report.created, report.updated, report.skipped, report.errors) == (7, 1, 2, 0)
    assert _count(session) == 8

    batch = BatchService.get(session, report.batch_id)
    assert batch.filename == "book.csv"
    assert (batch.created_count, batch.updated_count,
            batch.skipped_count, batch.error_count) == (7, 1, 2, 0)


def test_existing_phone_with_different_format_is_updated(session):
    run_import(_csv("Jane,Doe,555-111-2222,,,Aetna,"))
    report = run_import(_csv("Jane,Doe,(555) 111-2222,,,Humana,"))

    assert (report.created, report.updated) == (0, 1)
    clients = list(session.scalars(select(Client)))
    assert len(clients) == 1
    assert clients[0].carrier == "Humana"


def test_reimporting_same_file_creates_nothing(session):
    content = _csv(
        "Jane,Doe,555-111-2222,jane@example.com,01/15/2024,Humana,active",
        "John,Smith,,john@example.com,10/01/2023,Aetna,active",
    )
    first = run_import(content)
    second = run_import(content)

    assert (first.created, first.updated) == (2, 0)
    assert (second.created, second.updated) == (0, 2)
    assert _count(session) == 2


def test_identity_fields_read_back_normalised(session):
    report = run_import(_csv(
        "Jane,Doe,+1 (555) 111-2222,,,,",
        "John,Smith,,John.Smith@Example.COM,,,",
    ))
    clients = {c.first_name: c for c in session.scalars(
        select(Client).where(Client.source_batch_id == report.batch_id)
    )}
    assert clients["Jane"].phone == "5551112222"
    assert clients["John"].email == "john.smith@example.com"


def test_nameless_row_with_phone_is_not_imported(session):
    report = run_import(_csv(",,555-111-2222,,,,", "Jane,Doe,555-111-3333,,,,"))

    assert report.skipped == 1
    assert report.created == 1
    assert session.scalar(select(Client).where(Client.phone == "5551112222")) is None
    row_issues = [i for i in report.issues if i.row == 2]
    assert row_issues and "no first or last name" in row_issues[0].message


def test_row_without_identity_counts_as_error(session):
    report = run_import(_csv("Jane,Doe,,,,,", "John,Smith,5551112222,,,,"))
    assert (report.created, report.errors) == (1, 1)
    assert any(i.row == 2 and i.severity == "error" for i in report.issues)


def test_dates_and_status_are_normalised(session):
    report = run_import(_csv("Jane,Doe,5551112222,,01/15/2024,Humana,LOST"))
    client = session.scalar(select(Client).where(Client.source_batch_id == report.batch_id))
    assert client.effective_date == date(2024, 1, 15)
    assert client.status == "lost"


def test_bad_date_is_a_warning_not_a_failure(session):
    report = run_import(_csv("Jane,Doe,5551112222,,someday,,"))
    assert report.created == 1
    assert report.errors == 0
    assert any("invalid date" in i.message for i in report.issues)


def test_blocking_mapping_writes_nothing(session):
    content = "First Name,Last Name,Carrier\nJane,Doe,Humana\n"
    with pytest.raises(ValidationError) as exc:
        run_import(content)

    assert any("Phone or Email" in i.message for i in exc.value.issues)
    assert _count(session) == 0
    assert _count(session, ImportBatch) == 0


def test_header_only_file_is_rejected(session):
    with pytest.raises(ImportFileError):
        run_import(HEADER)
    with pytest.raises(ImportFileError):
        run_import(b"")


def test_default_carrier_fills_blank_cells(session):
    report = run_import(
        "Name,Phone\nJane Doe,5551112222\n",
        defaults={"carrier": "Humana"},
    )
    client = session.scalar(select(Client).where(Client.source_batch_id == report.batch_id))
    assert (client.first_name, client.last_name) == ("Jane", "Doe")
    assert client.carrier == "Humana"


def test_two_dimensional_input(session):
    report = run_import(
        headers=["First", "Last", "Cell Phone", "Eff Date"],
        rows=[["Jane", "Doe", "555-111-2222", "2024-01-15"], ["", "", "", ""]],
    )
    assert report.total_rows == 1
    assert report.created == 1
    assert report.mapping == {"firstName": 0, "lastName": 1, "phone": 2, "effectiveDate": 3}


def test_operator_mapping_is_remembered_for_same_headers(session):
    content = "Col A,Col B,Col C\nJane,Doe,5551112222\n"
    mapping = {"firstName": 0, "lastName": 1, "phone": 2}

    run_import(content, mapping=mapping)
    assert _count(session, SavedMapping) == 1

    preview = preview_import("Col A,Col B,Col C\nJohn,Smith,5559998888\n")
    assert preview.from_saved
    assert preview.mapping == mapping
    assert preview.can_import

    other = preview_import("Col A,Col B,Col D\nJohn,Smith,5559998888\n")
    assert not other.from_saved
    assert other.mapping == {}
    assert not other.can_import


def test_remember_mapping_can_be_disabled(session):
    run_import(_csv("Jane,Doe,5551112222,,,,"), remember_mapping=False)
    assert _count(session, SavedMapping) == 0


def test_preview_writes_nothing(session):
    preview = preview_import(_csv(
        "Jane,Doe,555-111-2222,,01/15/2024,humana,",
        ",,5551113333,,,,",
    ))
    assert preview.total_rows == 2
    assert preview.sample[0]["record"]["phone"] == "5551112222"
    assert preview.sample[0]["record"]["carrier"] == "Humana"
    assert preview.sample[1]["skipped"]
    assert _count(session) == 0
    assert _count(session, ImportBatch) == 0


def test_reversing_an_import_keeps_the_clients_it_updated(session):
    run_import(_csv("Old,Client,5550000001,,,Aetna,"))
    report = run_import(_csv(
        "Old,Client,5550000001,,,Humana,",
        "New,One,5550000002,,,,",
        "New,Two,5550000003,,,,",
    ))
    assert (report.created, report.updated) == (2, 1)

    batch = BatchService.reverse(session, report.batch_id)

    assert batch.reversed_count == 2
    remaining = list(session.scalars(select(Client)))
    assert [(c.first_name, c.carrier) for c in remaining] == [("Old", "Humana")]


def test_reimport_without_status_column_keeps_status(session):
    existing = ClientFactory(phone="5551112222", status="churned")

    report = run_import(
        headers=["First", "Last", "Phone", "Carrier"],
        rows=[["Ann", "Lee", "(555) 111-2222", "Humana"]],
    )

    assert report.updated == 1
    session.refresh(existing)
    assert (existing.status, existing.carrier) == ("churned", "Humana")


def test_blank_status_cell_keeps_status_and_new_rows_default_to_active(session):
    existing = ClientFactory(phone="5551112222", status="lost")

    report = run_import(_csv(
        "Ann,Lee,5551112222,,,,",
        "Bob,Ray,5553334444,,,,",
    ))

    assert (report.created, report.updated) == (1, 1)
    session.refresh(existing)
    assert existing.status == "lost"
    created = session.scalar(select(Client).where(Client.phone == "5553334444"))
    assert created.status == "active"


def test_mapping_cache_failure_still_returns_counts(session, monkeypatch):
    def _fail(session, headers, mapping):
        raise IntegrityError("INSERT INTO saved_mappings", {}, Exception("UNIQUE constraint failed"))

    monkeypatch.setattr(MappingService, "remember", staticmethod(_fail))

    report = run_import(_csv("Jane,Doe,5551112222,,,,"))

    assert report.created == 1
    batch = BatchService.get(session, report.batch_id)
    assert batch.status == "completed"
    assert batch.created_count == 1
    assert _count(session, SavedMapping) == 0
