"""
User Model - Workspace member identity

Mirror of the identity store: only what call scheduling needs
(display name and email copied onto call participants, role in workspaces).
"""
from sqlalchemy import Column, String, DateTime, CheckConstraint
import uuid

from .database import Base, utcnow


class User(Base):
    """Workspace member (client or freelancer)"""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)

    # 'client' or 'freelancer'
    role = Column(String(20), nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("role IN ('client', 'freelancer')", name='ck_user_role'),
    )

    def to_public_dict(self):
        """Identity fields safe to show to the other workspace member"""
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
        }

    def __repr__(self):
        return f"<User {self.email or self.id[:8]}>"
