from allotment.core.models.allotment import Allotment
from allotment.core.models.class_model import SchoolClass
from allotment.core.models.section_model import Section
from allotment.core.models.student import Student
from allotment.core.models.user import User

__all__ = [
    "Allotment",
    "SchoolClass",
    "Section",
    "Student",
    "User",
]
