"""Prompt, version and translation models."""

import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from app.persistence.database import Base


class PromptType(str, enum.Enum):
    """Role a prompt plays when sent to a model."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    GUARD = "guard"
    TEMPLATE = "template"
    COMPOSITION = "composition"
    CONTEXT = "context"


class VersionStatus(str, enum.Enum):
    """Status of a prompt or asset version."""
    DRAFT = "draft"
    ACTIVE = "active"
    INACTIVE = "inactive"
    ARCHIVED = "archived"


class Prompt(Base):
    """Prompt identified by a key unique within its project."""

    __tablename__ = "prompts"
    __table_args__ = (UniqueConstraint("project_id", "key", name="uq_prompts_project_key"),)

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(String(64), ForeignKey("projects.id"), nullable=False, index=True)
    key = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    type = Column(String(30), default=PromptType.SYSTEM.value, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    project = relationship("Project", back_populates="prompts")
    versions = relationship(
        "PromptVersion", back_populates="prompt", cascade="all, delete-orphan"
    )
    assets = relationship("PromptAsset", back_populates="prompt", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Prompt(id={self.id}, project_id={self.project_id}, key={self.key}, type={self.type})>"


class PromptVersion(Base):
    """Immutable revision of a prompt's base text."""

    __tablename__ = "prompt_versions"
    __table_args__ = (UniqueConstraint("prompt_id", "version_tag", name="uq_prompt_versions_prompt_tag"),)

    id = Column(Integer, primary_key=True, index=True)
    prompt_id = Column(Integer, ForeignKey("prompts.id"), nullable=False, index=True)
    version_tag = Column(String(50), nullable=False)
    prompt_text = Column(Text, nullable=False)
    language_code = Column(String(10), default="en", nullable=False)  # base language
    status = Column(String(20), default=VersionStatus.DRAFT.value, nullable=False)
    change_message = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    prompt = relationship("Prompt", back_populates="versions")
    translations = relationship(
        "PromptTranslation", back_populates="version", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<PromptVersion(id={self.id}, prompt_id={self.prompt_id}, version_tag={self.version_tag}, status={self.status})>"


class PromptTranslation(Base):
    """Language-specific text overriding a version's base text."""

    __tablename__ = "prompt_translations"
    __table_args__ = (
        UniqueConstraint("version_id", "language_code", name="uq_prompt_translations_version_lang"),
    )

    id = Column(Integer, primary_key=True, index=True)
    version_id = Column(Integer, ForeignKey("prompt_versions.id"), nullable=False, index=True)
    language_code = Column(String(10), nullable=False)
    prompt_text = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    version = relationship("PromptVersion", back_populates="translations")

    def __repr__(self) -> str:
        return f"<PromptTranslation(id={self.id}, version_id={self.version_id}, language_code={self.language_code})>"
