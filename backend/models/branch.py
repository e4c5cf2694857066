"""Branch model definitions."""

from sqlalchemy import Column, Integer, String
from backend.database import Base


class Branch(Base):
    """Represents a location where appointments take place."""
    __tablename__ = "branches"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    address = Column(String)
    phone = Column(String)
    email = Column(String)
    operating_hours = Column(String)
