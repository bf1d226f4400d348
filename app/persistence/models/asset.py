"""Prompt asset models: reusable, versioned text fragments."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from app.persistence.database import Base
from app.persistence.models.prompt import VersionStatus


class PromptAsset(Base):
    """Asset owned by a prompt, referenced as {{asset:<key>}}."""

    __tablename__ = "prompt_assets"
    __table_args__ = (UniqueConstraint("prompt_id", "key", name="uq_prompt_assets_prompt_key"),)

    id = Column(Integer, primary_key=True, index=True)
    prompt_id = Column(Integer, ForeignKey("prompts.id"), nullable=False, index=True)
    key = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    prompt = relationship("Prompt", back_populates="assets")
    versions = relationship(
        "PromptAssetVersion", back_populates="asset", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<PromptAsset(id={self.id}, prompt_id={self.prompt_id}, key={self.key})>"


class PromptAssetVersion(Base):
    """Immutable revision of an asset's base value."""

    __tablename__ = "prompt_asset_versions"
    __table_args__ = (UniqueConstraint("asset_id", "version_tag", name="uq_asset_versions_asset_tag"),)

    id = Column(Integer, primary_key=True, index=True)
    asset_id = Column(Integer, ForeignKey("prompt_assets.id"), nullable=False, index=True)
    version_tag = Column(String(50), nullable=False)
    value = Column(Text, nullable=False)
    language_code = Column(String(10), default="en", nullable=False)
    status = Column(String(20), default=VersionStatus.DRAFT.value, nullable=False)
    change_message = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    asset = relationship("PromptAsset", back_populates="versions")
    translations = relationship(
        "AssetTranslation", back_populates="version", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<PromptAssetVersion(id={self.id}, asset_id={self.asset_id}, version_tag={self.version_tag}, status={self.status})>"


class AssetTranslation(Base):
    """Language-specific value overriding an asset version's base value."""

    __tablename__ = "asset_translations"
    __table_args__ = (
        UniqueConstraint("version_id", "language_code", name="uq_asset_translations_version_lang"),
    )

    id = Column(Integer, primary_key=True, index=True)
    version_id = Column(Integer, ForeignKey("prompt_asset_versions.id"), nullable=False, index=True)
    language_code = Column(String(10), nullable=False)
    value = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    version = relationship("PromptAssetVersion", back_populates="translations")

    def __repr__(self) -> str:
        return f"<AssetTranslation(id={self.id}, version_id={self.version_id}, language_code={self.language_code})>"
