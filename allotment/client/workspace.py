"""Operator workspace for allotting students to a class and section.

Holds the current class/section selection, the students staged for a bulk submit, the
edit state of one allotment row and a presentation-only ordering of the allotted rows.
Server data lives in the QueryCache; every successful mutation re-fetches the allotments
so the view converges to what the server has.

With no class or no section selected, nothing counts as allotted: `persisted_view` is
empty and every unstaged student is available.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from allotment.api.v1.allotments.schemas import AllotmentView
from allotment.api.v1.classes.schemas import ClassResponse
from allotment.api.v1.sections.schemas import SectionResponse
from allotment.api.v1.students.schemas import StudentResponse

from .api_client import AllotmentApiClient, ApiError
from .cache import QueryCache

logger = logging.getLogger(__name__)

STUDENTS = "students"
CLASSES = "classes"
SECTIONS = "sections"
ALLOTMENTS = "allotments"


@dataclass
class Notification:
    level: str  # "success" | "info" | "warning" | "error"
    message: str


@dataclass
class EditState:
    allotment_id: int
    class_id: Optional[int]
    section_id: Optional[int]


@dataclass
class BulkAllotmentResult:
    succeeded: List[int] = field(default_factory=list)
    failed: List[int] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.succeeded)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


class AllotmentWorkspace:
    def __init__(
        self,
        api: AllotmentApiClient,
        cache: Optional[QueryCache] = None,
        on_notify: Optional[Callable[[Notification], None]] = None,
    ) -> None:
        self.api = api
        self.cache = cache or QueryCache()
        self.cache.register(STUDENTS, api.list_students)
        self.cache.register(CLASSES, api.list_classes)
        self.cache.register(SECTIONS, api.list_sections)
        self.cache.register(ALLOTMENTS, api.list_allotments)
        self.cache.subscribe(ALLOTMENTS, self._on_allotments_changed)

        self.selected_class: Optional[ClassResponse] = None
        self.selected_section: Optional[SectionResponse] = None
        self.staged_students: List[StudentResponse] = []
        # Client-only row order; never sent to the server.
        self.local_order: List[int] = []
        self.editing: Optional[EditState] = None
        self.notifications: List[Notification] = []
        self._on_notify = on_notify

    # -- server data --

    @property
    def students(self) -> List[StudentResponse]:
        return self.cache.peek(STUDENTS, [])

    @property
    def classes(self) -> List[ClassResponse]:
        return self.cache.peek(CLASSES, [])

    @property
    def sections(self) -> List[SectionResponse]:
        return self.cache.peek(SECTIONS, [])

    @property
    def allotments(self) -> List[AllotmentView]:
        return self.cache.peek(ALLOTMENTS, [])

    async def refresh(self) -> bool:
        """Load (or reload) students, classes, sections and allotments."""
        try:
            for key in (STUDENTS, CLASSES, SECTIONS, ALLOTMENTS):
                await self.cache.invalidate(key)
        except ApiError as e:
            self.notify("error", f"Failed to load data: {e.message}")
            return False
        return True

    # -- derived views --

    @property
    def has_selection(self) -> bool:
        return self.selected_class is not None and self.selected_section is not None

    @property
    def has_filters(self) -> bool:
        return self.selected_class is not None or self.selected_section is not None

    @property
    def persisted_view(self) -> List[AllotmentView]:
        if not self.has_selection:
            return []
        return [
            a
            for a in self.allotments
            if a.class_id == self.selected_class.id and a.section_id == self.selected_section.id
        ]

    @property
    def available_students(self) -> List[StudentResponse]:
        """Students neither staged nor already allotted to the selected class and section."""
        staged = {s.id for s in self.staged_students}
        allotted = {a.student_id for a in self.persisted_view}
        return [s for s in self.students if s.id not in staged and s.id not in allotted]

    @property
    def ordered_allotments(self) -> List[AllotmentView]:
        by_id = {a.id: a for a in self.persisted_view}
        ordered = [by_id.pop(i) for i in self.local_order if i in by_id]
        # Rows the local order has not seen yet go last, in server order.
        return ordered + list(by_id.values())

    def _reset_local_order(self) -> None:
        self.local_order = [a.id for a in self.persisted_view]

    def _on_allotments_changed(self, key: str, value) -> None:
        self._reset_local_order()
        if self.editing is not None and not any(a.id == self.editing.allotment_id for a in value):
            # Row removed underneath the editor (another operator or our own delete).
            self.editing = None

    # -- notifications --

    def notify(self, level: str, message: str) -> None:
        notification = Notification(level, message)
        self.notifications.append(notification)
        log = logger.warning if level in ("warning", "error") else logger.info
        log(f"[{level}] {message}")
        if self._on_notify is not None:
            self._on_notify(notification)

    # -- selection and staging --

    def select_class(self, school_class: Optional[ClassResponse]) -> None:
        self.selected_class = school_class
        self.staged_students = []
        self._reset_local_order()

    def select_section(self, section: Optional[SectionResponse]) -> None:
        self.selected_section = section
        self.staged_students = []
        self._reset_local_order()

    def stage_student(self, student: StudentResponse) -> bool:
        """Add a student to the staged list. No-op if already staged or already allotted here."""
        if any(s.id == student.id for s in self.staged_students):
            return False
        if any(a.student_id == student.id for a in self.persisted_view):
            return False
        self.staged_students.append(student)
        return True

    def unstage_student(self, student_id: int) -> None:
        self.staged_students = [s for s in self.staged_students if s.id != student_id]

    def clear_staged(self) -> None:
        self.staged_students = []

    def clear_filters(self) -> bool:
        """Drop the class/section selection and the staged list. No-op when nothing is selected."""
        if not self.has_filters:
            return False
        self.selected_class = None
        self.selected_section = None
        self.staged_students = []
        self._reset_local_order()
        self.notify("info", "Filters cleared")
        return True

    # -- allotting --

    async def _refetch_allotments(self) -> None:
        try:
            await self.cache.invalidate(ALLOTMENTS)
        except ApiError as e:
            self.notify("error", f"Failed to refresh allotments: {e.message}")

    async def submit_staged(self) -> Optional[BulkAllotmentResult]:
        """Allot every staged student concurrently; report how many succeeded.

        Each request stands alone: a failure does not cancel or undo the others. Once all
        have settled the staged list is cleared, whatever the outcome.
        """
        if not self.has_selection or not self.staged_students:
            self.notify("warning", "Select a class and section and stage at least one student")
            return None
        class_id = self.selected_class.id
        section_id = self.selected_section.id
        staged = list(self.staged_students)

        outcomes = await asyncio.gather(
            *(self.api.create_allotment(s.id, class_id, section_id) for s in staged),
            return_exceptions=True,
        )

        result = BulkAllotmentResult()
        for student, outcome in zip(staged, outcomes):
            if isinstance(outcome, ApiError):
                logger.warning(f"Allotting student {student.id} failed: {outcome}")
                result.failed.append(student.id)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                result.succeeded.append(student.id)

        self.staged_students = []
        await self._refetch_allotments()
        self.notify("success", f"{_plural(result.success_count, 'student')} allotted successfully")
        return result

    async def direct_allot(self, student: StudentResponse) -> Optional[AllotmentView]:
        """Allot one student right away, bypassing the staged list."""
        if not self.has_selection:
            self.notify("warning", "Select a class and section first")
            return None
        try:
            view = await self.api.create_allotment(student.id, self.selected_class.id, self.selected_section.id)
        except ApiError as e:
            self.notify("error", f"Failed to allot student: {e.message}")
            return None
        await self._refetch_allotments()
        self.notify("success", "Student allotted successfully")
        return view

    async def remove_allotment(self, allotment_id: int) -> bool:
        try:
            await self.api.delete_allotment(allotment_id)
        except ApiError as e:
            self.notify("error", f"Failed to remove student: {e.message}")
            return False
        await self._refetch_allotments()
        self.notify("success", "Student removed from class-section")
        return True

    # -- editing one row --

    def begin_edit(self, allotment_id: int) -> bool:
        row = next((a for a in self.allotments if a.id == allotment_id), None)
        if row is None:
            self.notify("error", "Allotment not found")
            return False
        self.editing = EditState(allotment_id, row.class_id, row.section_id)
        return True

    def cancel_edit(self) -> None:
        self.editing = None

    def change_edit_class(self, class_id: Optional[int]) -> None:
        if self.editing is not None:
            self.editing.class_id = class_id

    def change_edit_section(self, section_id: Optional[int]) -> None:
        if self.editing is not None:
            self.editing.section_id = section_id

    async def commit_edit(self, allotment_id: int) -> bool:
        """Save the candidate class/section. On failure the row stays in edit mode."""
        edit = self.editing
        if edit is None or edit.allotment_id != allotment_id:
            return False
        if edit.class_id is None or edit.section_id is None:
            self.notify("warning", "Select a class and section")
            return False
        try:
            await self.api.update_allotment(allotment_id, edit.class_id, edit.section_id)
        except ApiError as e:
            self.notify("error", f"Failed to update allotment: {e.message}")
            return False
        self.editing = None
        await self._refetch_allotments()
        self.notify("success", "Allotment updated successfully")
        return True

    # -- presentation order --

    def reorder_local(self, from_id: int, to_id: int) -> None:
        """Move `from_id` to the position of `to_id` (array move). Local only."""
        if from_id == to_id:
            return
        order = [a.id for a in self.ordered_allotments]
        if from_id not in order or to_id not in order:
            return
        order.remove(from_id)
        target = [a.id for a in self.ordered_allotments].index(to_id)
        order.insert(target, from_id)
        self.local_order = order
