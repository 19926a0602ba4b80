from stockroom.services.access_service import fetch_company_access


def test_no_staff_record_returns_none(backend):
    backend.tables["staff"] = []
    assert fetch_company_access(backend, "nobody@example.com") is None


def test_staff_lookup_error_returns_none(backend):
    backend.fail("select", "staff")
    assert fetch_company_access(backend, "staff@example.com") is None


def test_access_lookup_error_returns_none(backend):
    backend.tables["staff"] = [{"id": "s1", "staff_email": "staff@example.com"}]
    backend.fail("select", "company_access")
    assert fetch_company_access(backend, "staff@example.com") is None


def test_staff_without_grants_returns_empty_list(backend):
    backend.tables["staff"] = [{"id": "s1", "staff_email": "staff@example.com"}]
    backend.tables["company_access"] = [{"id": "a9", "business_name": "Other", "owner_id": "o2", "staff_id": "s2"}]
    assert fetch_company_access(backend, "staff@example.com") == []


def test_grants_are_mapped_with_defaults(backend):
    backend.tables["staff"] = [{"id": "s1", "staff_email": "staff@example.com"}]
    backend.tables["company_access"] = [
        {"id": "a1", "business_name": "Iron Temple", "owner_id": "o1", "staff_id": "s1", "created_at": "2024-05-01T10:00:00+00:00"},
        {"id": "a2", "business_name": None, "owner_id": None, "staff_id": "s1", "created_at": None},
    ]
    access = fetch_company_access(backend, "staff@example.com")

    assert [a.business_name for a in access] == ["Iron Temple", "Unknown Company"]
    assert access[1].owner_id == ""
    assert access[0].created_at.year == 2024
    (staff_call,) = backend.calls_to("select", "staff")
    assert staff_call[2] == {"columns": "id", "match": {"staff_email": "staff@example.com"}}
