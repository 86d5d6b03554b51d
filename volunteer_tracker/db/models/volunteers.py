from sqlalchemy import Column, Integer, String, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
from .base import Base


class Volunteer(Base):
    __tablename__ = 'volunteers'
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=True)
    # stored as "H:MM"
    hour_goal = Column(String(16), nullable=True)

    events = relationship("Event", back_populates="volunteer")


class Event(Base):
    __tablename__ = 'events'
    id = Column(Integer, primary_key=True, autoincrement=True)
    volunteer_id = Column(Integer, ForeignKey('volunteers.id'), nullable=False)
    event = Column(Text, nullable=False)
    location = Column(Text, nullable=False)
    # stored as "H:MM"
    hours = Column(String(16), nullable=False)
    # stored as "YYYY-MM-DD"
    date = Column(String(10), nullable=False)

    volunteer = relationship("Volunteer", back_populates="events")

    __table_args__ = (
        Index('idx_events_volunteer_id', 'volunteer_id'),
        Index('idx_events_date', 'date'),
    )
