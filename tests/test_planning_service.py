import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
from sqlalchemy import event

from core.database import create_db_engine, create_session_factory, init_db
from core.errors import StorageWriteError, ValidationAppException
from modules.planning import schemas, service


@pytest.fixture
def db(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'planning.db'}")
    init_db(engine)
    session = create_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


def build_snapshot(**overrides):
    data = {
        "products": [{"id": "P1", "name": "Widget", "profit": 5}],
        "resources": [{"id": "R1", "name": "Steel", "stock": 100}],
        "consumption": {"R1_P1": 3},
    }
    data.update(overrides)
    return schemas.SnapshotIn(**data)


def test_split_plain_key():
    assert service.split_consumption_key("R1_P1", {"R1"}, {"P1"}) == ("R1", "P1")


def test_split_prefers_submitted_ids():
    assert service.split_consumption_key("R_1_P_1", {"R_1"}, {"P_1"}) == ("R_1", "P_1")
    assert service.split_consumption_key("R_1_P_1", {"R"}, {"1_P_1"}) == ("R", "1_P_1")


def test_split_unknown_ids_falls_back_to_first_separator():
    assert service.split_consumption_key("R9_P_9", set(), set()) == ("R9", "P_9")


def test_split_without_separator_is_malformed():
    with pytest.raises(StorageWriteError, match="Malformed"):
        service.split_consumption_key("R1P1", {"R1"}, {"P1"})


def test_split_ambiguous_key():
    with pytest.raises(StorageWriteError, match="Ambiguous"):
        service.split_consumption_key("A_B_C", {"A", "A_B"}, {"B_C", "C"})


def test_consumption_key_format():
    assert service.consumption_key("R1", "P1") == "R1_P1"


def test_replace_and_read_back(db):
    service.replace_snapshot(db, build_snapshot())
    snapshot = service.get_snapshot(db)
    assert snapshot == {
        "products": [{"id": "P1", "name": "Widget", "profit": 5.0}],
        "resources": [{"id": "R1", "name": "Steel", "stock": 100.0}],
        "consumption": {"R1_P1": 3.0},
    }


def test_products_and_resources_are_ordered_by_id(db):
    service.replace_snapshot(
        db,
        build_snapshot(
            products=[
                {"id": "P2", "name": "B", "profit": 1},
                {"id": "P1", "name": "A", "profit": 1},
            ],
            resources=[
                {"id": "R2", "name": "B", "stock": 1},
                {"id": "R1", "name": "A", "stock": 1},
            ],
            consumption={},
        ),
    )
    snapshot = service.get_snapshot(db)
    assert [p["id"] for p in snapshot["products"]] == ["P1", "P2"]
    assert [r["id"] for r in snapshot["resources"]] == ["R1", "R2"]


def test_duplicate_pairs_last_one_wins(db):
    service.replace_snapshot(
        db,
        build_snapshot(
            consumption=[
                {"resource_id": "R1", "product_id": "P1", "amount": 1},
                {"resource_id": "R1", "product_id": "P1", "amount": 4},
            ]
        ),
    )
    assert service.get_snapshot(db)["consumption"] == {"R1_P1": 4.0}


def test_replace_same_session_twice(db):
    service.replace_snapshot(db, build_snapshot())
    service.replace_snapshot(db, build_snapshot(consumption={"R1_P1": 8}))
    assert service.get_snapshot(db)["consumption"] == {"R1_P1": 8.0}


def test_missing_fields_raise_before_touching_storage(db):
    service.replace_snapshot(db, build_snapshot())
    with pytest.raises(ValidationAppException) as exc_info:
        service.replace_snapshot(db, schemas.SnapshotIn(products=[]))
    assert exc_info.value.status_code == 400
    assert "resources" in exc_info.value.message
    assert "consumption" in exc_info.value.message
    assert service.get_snapshot(db)["consumption"] == {"R1_P1": 3.0}


def test_foreign_key_violation_rolls_back(db):
    service.replace_snapshot(db, build_snapshot())
    before = service.get_snapshot(db)

    with pytest.raises(StorageWriteError) as exc_info:
        service.replace_snapshot(
            db,
            build_snapshot(
                products=[{"id": "P7", "name": "Other", "profit": 2}],
                consumption={"R1_P404": 1},
            ),
        )

    assert "FOREIGN KEY" in exc_info.value.message
    assert exc_info.value.status_code == 500
    assert service.get_snapshot(db) == before


def test_init_db_is_idempotent(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'planning.db'}")
    init_db(engine)
    init_db(engine)
    session = create_session_factory(engine)()
    try:
        assert service.get_snapshot(session) == {"products": [], "resources": [], "consumption": {}}
    finally:
        session.close()
        engine.dispose()


def test_snapshot_reads_one_committed_state_while_another_session_replaces(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'planning.db'}")
    init_db(engine)
    session_factory = create_session_factory(engine)
    writer = session_factory()
    reader = session_factory()
    try:
        service.replace_snapshot(writer, build_snapshot())

        queries = []

        def replace_between_reads(orm_execute_state):
            queries.append(orm_execute_state.statement)
            # products were already read; commit a different dataset before resources are read
            if len(queries) == 2:
                service.replace_snapshot(
                    writer,
                    build_snapshot(
                        products=[{"id": "P2", "name": "Gadget", "profit": 1}],
                        resources=[{"id": "R2", "name": "Labour", "stock": 2}],
                        consumption={"R2_P2": 9},
                    ),
                )

        event.listen(reader, "do_orm_execute", replace_between_reads)
        snapshot = service.get_snapshot(reader)
        event.remove(reader, "do_orm_execute", replace_between_reads)

        assert len(queries) == 3
        assert snapshot == {
            "products": [{"id": "P1", "name": "Widget", "profit": 5.0}],
            "resources": [{"id": "R1", "name": "Steel", "stock": 100.0}],
            "consumption": {"R1_P1": 3.0},
        }

        reader.rollback()
        assert service.get_snapshot(reader)["consumption"] == {"R2_P2": 9.0}
    finally:
        reader.close()
        writer.close()
        engine.dispose()


def test_snapshot_records_keep_ids_separate(db):
    service.replace_snapshot(
        db,
        build_snapshot(
            products=[{"id": "B_C", "name": "One", "profit": 1}, {"id": "C", "name": "Two", "profit": 1}],
            resources=[{"id": "A", "name": "Three", "stock": 1}, {"id": "A_B", "name": "Four", "stock": 1}],
            consumption=[{"resource_id": "A", "product_id": "B_C", "amount": 2}],
        ),
    )
    snapshot = service.get_snapshot_records(db)
    assert snapshot["consumption"] == [{"resource_id": "A", "product_id": "B_C", "amount": 2.0}]
    assert [p["id"] for p in snapshot["products"]] == ["B_C", "C"]
