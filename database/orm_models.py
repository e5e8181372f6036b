"""
SQLAlchemy ORM models for stored pillar responses
"""

from datetime import datetime
import uuid

from sqlalchemy import (
    Column,
    String,
    Integer,
    DateTime,
    JSON,
    Date,
    Index,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()  # type: ignore


class PillarResponseRow(Base):  # type: ignore
    """One dated set of answers for a pillar"""
    __tablename__ = "pillar_responses"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    pillar = Column(String(50), nullable=False)
    response_date = Column(Date, nullable=False)
    responses = Column(JSON, nullable=False, default=dict)  # question id -> answer
    user_id = Column(String(255), nullable=True)
    schema_version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("ix_pillar_responses_pillar_date", "pillar", "response_date"),
    )

    def __repr__(self):
        return f"<PillarResponseRow {self.pillar} {self.response_date} v{self.schema_version}>"
