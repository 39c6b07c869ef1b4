"""Sections (A, B, C). Independent of classes: any class can be paired with any section."""
from sqlalchemy import Column, Integer, String

from allotment.db.session import Base


class Section(Base):
    __tablename__ = "sections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False)
