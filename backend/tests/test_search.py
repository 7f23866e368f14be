from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlmodel import Session

from puppy_spa.services.entry_search import list_entries, search_entries
from puppy_spa.services.errors import InternalError
from puppy_spa.services.list_resolution import create_list, get_list_by_date, resolve_list_for_entry
from puppy_spa.services.position_manager import EntryFields, insert_entry, update_entry_status


@pytest.fixture
def salon(session: Session):
    """Two days of entries"""
    march_20 = create_list(session, "2024-03-20")
    march_21 = create_list(session, "2024-03-21")

    def add(waiting_list, owner, puppy, service):
        return insert_entry(
            session,
            waiting_list.id,
            EntryFields(service_required=service, arrival_time=datetime(2024, 3, 20, 10), owner_name=owner, puppy_name=puppy),
        )

    entries = {
        "max": add(march_20, "John Doe", "Max", "Grooming"),
        "bella": add(march_20, "Jane Smith", "Bella", "Bath"),
        "maxine": add(march_21, None, "Maxine", "Nail trim"),
        "rex": add(march_21, "Maximilian Ross", None, "50% off wash"),
    }
    return {"lists": (march_20, march_21), "entries": entries}


def _puppies(entries):
    return [e.puppy_name or e.owner_name for e in entries]


def test_search_is_case_insensitive(session: Session, salon):
    assert "Max" in _puppies(search_entries(session, "max"))
    assert "Max" in _puppies(search_entries(session, "MAX"))


def test_search_matches_owner_puppy_and_service(session: Session, salon):
    assert _puppies(search_entries(session, "smith")) == ["Bella"]
    assert _puppies(search_entries(session, "nail")) == ["Maxine"]
    assert _puppies(search_entries(session, "ross")) == ["Maximilian Ross"]


def test_search_orders_newest_list_first_then_position(session: Session, salon):
    assert _puppies(search_entries(session, "max")) == ["Maxine", "Maximilian Ross", "Max"]


def test_search_empty_query_returns_nothing(session: Session, salon):
    assert search_entries(session, "") == []
    assert search_entries(session, "   ") == []
    assert search_entries(session, None) == []


def test_search_escapes_like_wildcards(session: Session, salon):
    assert _puppies(search_entries(session, "50%")) == ["Maximilian Ross"]
    assert search_entries(session, "%") != []
    assert search_entries(session, "_a_") == []


def test_search_restricted_to_list_and_status(session: Session, salon):
    march_20, _ = salon["lists"]
    assert _puppies(search_entries(session, "max", waiting_list_id=march_20.id)) == ["Max"]

    update_entry_status(session, salon["entries"]["maxine"].id, "COMPLETED")
    assert _puppies(search_entries(session, "max", status="completed")) == ["Maxine"]


def test_list_entries_text_filter_does_not_short_circuit(session: Session, salon):
    assert len(list_entries(session, query="")) == 4


def test_search_endpoint(client: TestClient, session: Session, salon):
    response = client.get("/api/search", params={"query": "bElLa"})
    assert response.status_code == 200
    data = response.json()
    assert [e["puppy_name"] for e in data] == ["Bella"]
    assert data[0]["owner_name"] == "Jane Smith"


def test_search_endpoint_without_query(client: TestClient):
    response = client.get("/api/search")
    assert response.status_code == 200
    assert response.json() == []


def _failing_exec(*args, **kwargs):
    raise OperationalError("SELECT waitinglistentry", {}, Exception("disk I/O error"))


def test_search_persistence_failure_is_internal_error(session: Session, salon, monkeypatch):
    monkeypatch.setattr(Session, "exec", _failing_exec)
    with pytest.raises(InternalError) as excinfo:
        search_entries(session, "max")
    assert "disk" not in str(excinfo.value)


def test_lookup_persistence_failure_is_internal_error(session: Session, salon, monkeypatch):
    monkeypatch.setattr(Session, "exec", _failing_exec)
    with pytest.raises(InternalError):
        get_list_by_date(session, "2024-03-20")
    with pytest.raises(InternalError):
        resolve_list_for_entry(session, target_time=datetime(2024, 3, 20, 10))


def test_search_endpoint_persistence_failure_is_opaque_500(client: TestClient, monkeypatch):
    monkeypatch.setattr(Session, "exec", _failing_exec)
    response = client.get("/api/search", params={"query": "max"})
    assert response.status_code == 500
    assert response.json()["detail"] == "Internal server error"
