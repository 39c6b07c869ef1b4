from sqlalchemy import Column, Integer, String

from allotment.db.session import Base


class User(Base):
    """Operator-managed users. Email is unique."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    age = Column(Integer, nullable=False)
    email = Column(String(255), nullable=False, unique=True)
