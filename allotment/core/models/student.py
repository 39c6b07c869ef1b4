"""Students that can be allotted to a class and section. Created outside the allotment screen."""
from sqlalchemy import Column, Integer, String

from allotment.db.session import Base


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    age = Column(Integer, nullable=False)
