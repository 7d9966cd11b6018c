"""
Parcel database model.

One row per shipment record; the number is assigned by the database.
"""

from sqlalchemy import Column, Integer, Text
from parcels.app.db.session import Base


class Parcel(Base):
    """
    Parcel table mapping.
    
    Status is stored as plain text so that values outside ParcelStatus
    survive a round trip unchanged.
    """
    __tablename__ = "parcel"
    # Never reuse numbers of deleted rows on SQLite
    __table_args__ = {"sqlite_autoincrement": True}
    
    number = Column(Integer, primary_key=True, autoincrement=True)
    client = Column(Integer)
    status = Column(Text)
    address = Column(Text)
    created_at = Column(Text)
    
    def __repr__(self):
        return f"<Parcel(number={self.number}, client={self.client}, status='{self.status}')>"
