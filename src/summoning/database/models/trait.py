"""Trait definition catalog for monsters."""

from sqlalchemy import Boolean, Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, UuidPrimaryKeyMixin
from .monster import MonsterSource


class TraitDefinition(Base, UuidPrimaryKeyMixin, TimestampMixin):
    """
    A reusable monster trait (e.g. "Pack Tactics").

    Monsters reference definitions through MonsterTrait rows, so the effect
    text is maintained in one place.
    """

    __tablename__ = "trait_definitions"
    __mapper_args__ = {"eager_defaults": True}

    name: Mapped[str] = mapped_column(
        String(200),
        unique=True,
        nullable=False,
        comment="Unique trait name",
    )

    effect_text: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Rules text describing the trait's effect",
    )

    is_enabled: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default="true",
        comment="Disabled traits cannot be attached to monsters",
    )

    source: Mapped[MonsterSource] = mapped_column(
        Enum(MonsterSource),
        nullable=False,
        default=MonsterSource.CORE,
    )

    is_read_only: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default="true",
    )

    def __repr__(self) -> str:
        """String representation of TraitDefinition."""
        return f"<TraitDefinition(id={self.id}, name='{self.name}', enabled={self.is_enabled})>"
