from sqlalchemy import JSON, CheckConstraint, Column, String

from .database import Base


class TournamentRecord(Base):
    __tablename__ = "tournaments"

    id = Column(String(64), primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    stage = Column(String(16), default="league", nullable=False, index=True)

    owner_id = Column(String(64), nullable=False, index=True)
    invite_code = Column(String(32), unique=True, nullable=False, index=True)

    # Nested entities are stored as the snapshot's JSON shape.
    collaborators = Column(JSON, nullable=False, default=list)
    groups = Column(JSON, nullable=False, default=list)
    teams = Column(JSON, nullable=False, default=list)
    matches = Column(JSON, nullable=False, default=list)

    __table_args__ = (
        CheckConstraint(
            "stage in ('league', 'playoffs', 'completed')",
            name="ck_tournament_stage_valid",
        ),
    )
