import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from allotment.core.models import Allotment


async def _allot(client: AsyncClient, student_id: int, class_id: int, section_id: int):
    return await client.post(
        "/api/create-allotment",
        json={"studentId": student_id, "classId": class_id, "sectionId": section_id},
    )


async def _count(db_session: AsyncSession) -> int:
    result = await db_session.execute(select(func.count(Allotment.id)))
    return result.scalar_one()


@pytest.mark.asyncio
async def test_create_allotment_returns_joined_view(client: AsyncClient, school: dict) -> None:
    amy = school["students"]["Amy"]
    response = await _allot(client, amy, school["nursery"], school["a"])
    assert response.status_code == 201
    body = response.json()

    assert body["success"] is True
    data = body["data"]
    assert data["studentId"] == amy
    assert data["studentName"] == "Amy"
    assert data["studentAge"] == 7
    assert data["className"] == "Nursery"
    assert data["sectionName"] == "A"
    assert isinstance(data["id"], int) and data["id"] > 0
    assert "createdAt" in data


@pytest.mark.asyncio
async def test_duplicate_triple_is_conflict(client: AsyncClient, db_session: AsyncSession, school: dict) -> None:
    amy = school["students"]["Amy"]
    first = await _allot(client, amy, school["nursery"], school["a"])
    assert first.status_code == 201

    second = await _allot(client, amy, school["nursery"], school["a"])
    assert second.status_code == 409
    assert second.json() == {
        "success": False,
        "message": "This student is already allotted to the same class and section",
    }
    assert await _count(db_session) == 1


@pytest.mark.asyncio
async def test_same_student_in_another_section_is_allowed(client: AsyncClient, school: dict) -> None:
    amy = school["students"]["Amy"]
    assert (await _allot(client, amy, school["nursery"], school["a"])).status_code == 201
    assert (await _allot(client, amy, school["nursery"], school["b"])).status_code == 201


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"classId": 1, "sectionId": 1},
        {"studentId": 1, "sectionId": 1},
        {"studentId": 1, "classId": 1},
        {},
    ],
)
async def test_create_missing_field_is_bad_request(client: AsyncClient, school: dict, payload: dict) -> None:
    response = await client.post("/api/create-allotment", json=payload)
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "studentId, classId, and sectionId are required"


@pytest.mark.asyncio
async def test_create_with_malformed_id_is_bad_request(client: AsyncClient, school: dict) -> None:
    response = await client.post(
        "/api/create-allotment",
        json={"studentId": "not-a-number", "classId": school["nursery"], "sectionId": school["a"]},
    )
    assert response.status_code == 400
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_create_for_unknown_student_is_bad_request(
    client: AsyncClient, db_session: AsyncSession, school: dict
) -> None:
    response = await _allot(client, 9999, school["nursery"], school["a"])
    assert response.status_code == 400
    assert await _count(db_session) == 0


@pytest.mark.asyncio
async def test_list_is_ordered_by_id_after_updates(client: AsyncClient, school: dict) -> None:
    ids = []
    for name in ("Cara", "Amy", "Ben"):
        response = await _allot(client, school["students"][name], school["nursery"], school["a"])
        ids.append(response.json()["data"]["id"])

    # Touch the first row last; order must not follow update time.
    update = await client.put(
        f"/api/allotments/{ids[0]}", json={"classId": school["first"], "sectionId": school["b"]}
    )
    assert update.status_code == 200

    response = await client.get("/api/allotments")
    assert response.status_code == 200
    listed = [row["id"] for row in response.json()["data"]]
    assert listed == sorted(ids)


@pytest.mark.asyncio
async def test_update_moves_class_and_section_only(client: AsyncClient, school: dict) -> None:
    ben = school["students"]["Ben"]
    created = (await _allot(client, ben, school["nursery"], school["a"])).json()["data"]

    response = await client.put(
        f"/api/allotments/{created['id']}",
        json={"classId": school["first"], "sectionId": school["b"]},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["id"] == created["id"]
    assert data["studentId"] == ben
    assert data["className"] == "1st Grade"
    assert data["sectionName"] == "B"
    assert data["createdAt"] == created["createdAt"]


@pytest.mark.asyncio
async def test_update_missing_field_is_bad_request(client: AsyncClient, school: dict) -> None:
    created = (await _allot(client, school["students"]["Amy"], school["nursery"], school["a"])).json()["data"]
    response = await client.put(f"/api/allotments/{created['id']}", json={"classId": school["first"]})
    assert response.status_code == 400
    assert response.json()["message"] == "classId and sectionId are required"


@pytest.mark.asyncio
async def test_update_unknown_id_is_not_found(client: AsyncClient, db_session: AsyncSession, school: dict) -> None:
    await _allot(client, school["students"]["Amy"], school["nursery"], school["a"])
    before = (await client.get("/api/allotments")).json()["data"]

    response = await client.put("/api/allotments/424242", json={"classId": 1, "sectionId": 1})
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Allotment not found"}

    after = (await client.get("/api/allotments")).json()["data"]
    assert after == before


@pytest.mark.asyncio
async def test_update_onto_existing_triple_is_conflict(client: AsyncClient, school: dict) -> None:
    amy = school["students"]["Amy"]
    await _allot(client, amy, school["nursery"], school["a"])
    other = (await _allot(client, amy, school["nursery"], school["b"])).json()["data"]

    response = await client.put(
        f"/api/allotments/{other['id']}", json={"classId": school["nursery"], "sectionId": school["a"]}
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_delete_returns_row_then_not_found(client: AsyncClient, db_session: AsyncSession, school: dict) -> None:
    created = (await _allot(client, school["students"]["Dan"], school["nursery"], school["a"])).json()["data"]

    response = await client.delete(f"/api/allotments/{created['id']}")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["id"] == created["id"]
    assert body["data"]["studentName"] == "Dan"
    assert await _count(db_session) == 0

    again = await client.delete(f"/api/allotments/{created['id']}")
    assert again.status_code == 404


@pytest.mark.asyncio
async def test_deleting_student_cascades(client: AsyncClient, school: dict) -> None:
    amy = school["students"]["Amy"]
    ben = school["students"]["Ben"]
    await _allot(client, amy, school["nursery"], school["a"])
    await _allot(client, amy, school["first"], school["b"])
    await _allot(client, ben, school["nursery"], school["a"])

    response = await client.delete(f"/api/students/{amy}")
    assert response.status_code == 200

    rows = (await client.get("/api/allotments")).json()["data"]
    assert [row["studentId"] for row in rows] == [ben]


@pytest.mark.asyncio
async def test_deleting_section_cascades(client: AsyncClient, school: dict) -> None:
    await _allot(client, school["students"]["Amy"], school["nursery"], school["a"])
    await _allot(client, school["students"]["Ben"], school["nursery"], school["b"])

    assert (await client.delete(f"/api/sections/{school['a']}")).status_code == 200

    rows = (await client.get("/api/allotments")).json()["data"]
    assert [row["sectionName"] for row in rows] == ["B"]


@pytest.mark.asyncio
async def test_reference_lists(client: AsyncClient, school: dict) -> None:
    classes = (await client.get("/api/classes")).json()
    sections = (await client.get("/api/sections")).json()
    students = (await client.get("/api/students")).json()

    assert classes["success"] is True
    assert [c["name"] for c in classes["data"]] == ["1st Grade", "Nursery"]
    assert [s["name"] for s in sections["data"]] == ["B", "A"]
    assert {"id": school["students"]["Amy"], "name": "Amy", "age": 7} in students["data"]


@pytest.mark.asyncio
async def test_delete_unknown_class_is_not_found(client: AsyncClient, school: dict) -> None:
    response = await client.delete("/api/classes/9999")
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Class not found"}


@pytest.mark.asyncio
async def test_database_failure_on_list_is_500(client: AsyncClient, school: dict, monkeypatch) -> None:
    async def locked(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(AsyncSession, "execute", locked)
    response = await client.get("/api/allotments")

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Failed to fetch allotments"}
