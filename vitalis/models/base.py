"""Base SQLAlchemy model utilities."""
from sqlalchemy import Boolean, Column, Integer, false


class IDMixin:
    id = Column(Integer, primary_key=True, autoincrement=True)


class SoftDeleteMixin:
    deleted = Column(Boolean, nullable=False, default=False, server_default=false())
