import uuid

import factory
from factory.alchemy import SQLAlchemyModelFactory

from db.models import Client, ImportBatch


class ClientFactory(SQLAlchemyModelFactory):
    """Factory for creating Client rows (phone/email already normalised)."""

    class Meta:
        model = Client
        sqlalchemy_session_persistence = "commit"

    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    phone = factory.Sequence(lambda n: f"202{n:07d}")
    email = factory.Sequence(lambda n: f"client{n}@example.com")
    carrier = factory.Faker("random_element", elements=["Humana", "Aetna", "Cigna"])
    status = "active"
    source_batch_id = None


class ImportBatchFactory(SQLAlchemyModelFactory):
    """Factory for creating ImportBatch ledger rows."""

    class Meta:
        model = ImportBatch
        sqlalchemy_session_persistence = "commit"

    id = factory.LazyFunction(lambda: uuid.uuid4().hex)
    filename = factory.Sequence(lambda n: f"clients-{n}.csv")
    status = "completed"
    total_rows = 0
    created_count = 0
    updated_count = 0
    skipped_count = 0
    error_count = 0
