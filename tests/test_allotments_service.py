"""Service-level tests against the store, without HTTP."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from allotment.api.v1.allotments import service
from allotment.api.v1.allotments.schemas import AllotmentCreate, AllotmentUpdate
from allotment.api.v1.classes import service as class_service
from allotment.api.v1.students import service as student_service
from allotment.core.exceptions import ConflictError, NotFoundError, ValidationError


def _payload(student_id: int, class_id: int, section_id: int) -> AllotmentCreate:
    return AllotmentCreate(student_id=student_id, class_id=class_id, section_id=section_id)


@pytest.mark.asyncio
async def test_second_identical_create_raises_conflict(db_session: AsyncSession, school: dict) -> None:
    amy = school["students"]["Amy"]
    view = await service.create_allotment(db_session, _payload(amy, school["nursery"], school["a"]))
    assert view.class_name == "Nursery"

    with pytest.raises(ConflictError) as exc:
        await service.create_allotment(db_session, _payload(amy, school["nursery"], school["a"]))
    assert exc.value.status_code == 409

    rows = await service.list_allotments(db_session)
    assert [(r.student_id, r.class_id, r.section_id) for r in rows] == [(amy, school["nursery"], school["a"])]


@pytest.mark.asyncio
async def test_zero_id_counts_as_missing(db_session: AsyncSession, school: dict) -> None:
    with pytest.raises(ValidationError):
        await service.create_allotment(db_session, _payload(0, school["nursery"], school["a"]))


@pytest.mark.asyncio
async def test_update_and_delete_unknown_id(db_session: AsyncSession, school: dict) -> None:
    with pytest.raises(NotFoundError):
        await service.update_allotment(db_session, 12345, AllotmentUpdate(class_id=1, section_id=1))
    with pytest.raises(NotFoundError):
        await service.delete_allotment(db_session, 12345)
    assert await service.list_allotments(db_session) == []


@pytest.mark.asyncio
async def test_delete_class_cascades(db_session: AsyncSession, school: dict) -> None:
    students = school["students"]
    await service.create_allotment(db_session, _payload(students["Amy"], school["nursery"], school["a"]))
    await service.create_allotment(db_session, _payload(students["Ben"], school["first"], school["a"]))

    await class_service.delete_class(db_session, school["nursery"])

    rows = await service.list_allotments(db_session)
    assert [r.class_name for r in rows] == ["1st Grade"]


@pytest.mark.asyncio
async def test_delete_student_not_found(db_session: AsyncSession, school: dict) -> None:
    with pytest.raises(NotFoundError):
        await student_service.delete_student(db_session, 9999)
