"""SQLAlchemy ORM models for simulation history"""

import uuid
from sqlalchemy import Column, DateTime, Integer, Numeric, Text, Uuid
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class InvestmentSimulation(Base):
    """Resolved investment simulation"""

    __tablename__ = "investment_simulation"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    request_id = Column(Text, nullable=True)
    capital = Column(Numeric(18, 2), nullable=False)
    term_value = Column(Integer, nullable=False)
    term_unit = Column(Text, nullable=False)  # "days" or "months"
    term_days = Column(Integer, nullable=False)
    tier_id = Column(Integer, nullable=True, index=True)
    rate = Column(Numeric(9, 4), nullable=False)
    net_interest = Column(Numeric(18, 2), nullable=False)
    total_payout = Column(Numeric(18, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
