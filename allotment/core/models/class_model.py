"""Class master (Nursery, 1st Grade, ...). Model named SchoolClass to avoid Python 'class' keyword."""
from sqlalchemy import Column, Integer, String

from allotment.db.session import Base


class SchoolClass(Base):
    __tablename__ = "classes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
