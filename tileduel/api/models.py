"""
SQLAlchemy models for relay rooms.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Text

from .database import Base


class Room(Base):
    __tablename__ = "rooms"

    id = Column(String(36), primary_key=True)  # uuid
    room_code = Column(String(8), unique=True, nullable=False, index=True)  # 4-char alphanumeric join code
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    status = Column(String(32), nullable=False, default="waiting")  # waiting | active | finished
    seats_taken = Column(Integer, nullable=False, default=1)  # host holds seat 0 on creation
    grid_size = Column(Integer, nullable=False, default=4)
    game_state = Column(Text, nullable=True)  # JSON of the last {"state": ...} handoff, for reconnects
