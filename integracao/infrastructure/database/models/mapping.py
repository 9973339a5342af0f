# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""External id mapping model.

A MappingRecord binds an entity of the academic-management system (the
gestor) to the entity created for it inside the learning platform. Each
entity kind has its own external id namespace:

- course: trm_id (turma) -> platform course id
- group: grp_id -> platform group id
- user: pes_id (pessoa) -> platform user id
- student_enrolment: mat_id (matricula) -> platform user id
- discipline: ofd_id (oferta de disciplina) -> platform section id
- discipline_enrolment: mof_id (matricula na oferta) -> platform user id
"""

from enum import Enum

from sqlalchemy import BigInteger, Integer, String, UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column

from integracao.infrastructure.database.models.base import Base, TimestampMixin


class MappingKind(str, Enum):
    """Entity kinds tracked by the mapping store."""

    COURSE = "course"
    GROUP = "group"
    USER = "user"
    STUDENT_ENROLMENT = "student_enrolment"
    DISCIPLINE = "discipline"
    DISCIPLINE_ENROLMENT = "discipline_enrolment"


class MappingRecord(Base, TimestampMixin):
    """Binding between a gestor id and a platform id.

    Attributes:
        id: Surrogate primary key.
        kind: Entity kind (see MappingKind).
        external_id: Identifier in the gestor.
        internal_id: Identifier in the platform.
        course_id: Platform course containing the entity, if any.
        group_id: Platform group attached to the entity, if any.
        owner_id: Platform user owning the entity (discipline teacher).
    """

    __tablename__ = "integration_mappings"
    __table_args__ = (
        UniqueConstraint("kind", "external_id", name="uq_integration_mappings_kind_external"),
        Index("ix_integration_mappings_kind_internal", "kind", "internal_id"),
        Index("ix_integration_mappings_course", "course_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    kind: Mapped[str] = mapped_column(String(32), nullable=False)
    external_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    internal_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    course_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    group_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    owner_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<MappingRecord {self.kind}:{self.external_id} -> {self.internal_id}>"
        )
