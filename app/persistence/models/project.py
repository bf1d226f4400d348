"""Project model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship

from app.persistence.database import Base


class Project(Base):
    """Project model owning a set of prompts."""

    __tablename__ = "projects"

    id = Column(String(64), primary_key=True)  # slug, e.g. "acme-support"
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    prompts = relationship("Prompt", back_populates="project", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, name={self.name})>"
