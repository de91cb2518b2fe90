"""
Saved plan version model
"""

from sqlalchemy import Column, DateTime, String, Text

from seatplan.core.db import Base

class Version(Base):
    __tablename__ = "versions"

    id = Column(String(36), primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    saved_at = Column(DateTime(timezone=True), nullable=False, index=True)
    payload = Column(Text, nullable=False)  # JSON: guests, tables, stageSize, pan
