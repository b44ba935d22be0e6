"""SQLAlchemy ORM models for stored PTZ submissions"""

import uuid
from sqlalchemy import Column, String, BigInteger, Boolean, DateTime, Integer, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


def _uuid() -> str:
    return str(uuid.uuid4())


class PTZSubmission(Base):
    """One completed simulation with its computed eligibility snapshot"""

    __tablename__ = "ptz_submission"

    id = Column(String(36), primary_key=True, default=_uuid)
    submission_date = Column(String(32), nullable=True)

    # Contact
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False, index=True)
    phone = Column(Text, nullable=True)
    address = Column(Text, nullable=True)
    commune = Column(Text, nullable=True)

    # Household profile
    household_size = Column(Integer, nullable=False)
    zone = Column(String(2), nullable=False)
    income = Column(BigInteger, nullable=False)
    housing_type = Column(String(16), nullable=False)
    project_cost = Column(BigInteger, nullable=False)
    not_prior_owner = Column(Boolean, nullable=True)

    # Eligibility (always produced by the calculator)
    eligible = Column(Boolean, nullable=False)
    income_bracket = Column(Integer, nullable=True)
    quota_percent = Column(Integer, nullable=True)
    cost_ceiling = Column(BigInteger, nullable=True)
    capped_project_cost = Column(BigInteger, nullable=True)
    loan_amount = Column(BigInteger, nullable=True)
    reason = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
