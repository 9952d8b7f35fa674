"""
Workspace Model - Client/freelancer pairing

A workspace is the access boundary for calls: only its client and its
freelancer may schedule, see or join the calls held in it.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey
import uuid

from .database import Base, utcnow


class Workspace(Base):
    """Pairing of one client and one freelancer"""
    __tablename__ = "workspaces"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    title = Column(String(255), nullable=False, default="Workspace")

    client_id = Column(String(36), ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    freelancer_id = Column(String(36), ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
