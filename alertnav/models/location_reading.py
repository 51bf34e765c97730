"""Location Reading Model"""
from sqlalchemy import Column, Integer, BigInteger, Float, String, Text, Index
from alertnav.database import Base


class LocationReading(Base):
    """Position reported by a device. Rows are written by the ingestion pipeline."""
    __tablename__ = "iot_data"

    id = Column(Integer, primary_key=True, index=True)
    device_id = Column(String(100), nullable=False, index=True)
    lat = Column(Float)
    lon = Column(Float)
    event = Column(Text)  # 'Construction', 'Blocked Road', 'Stop Sign', ...
    group = Column("group", Text)
    timestamp = Column(BigInteger, nullable=False)  # Unix epoch seconds
    user_email = Column(String(255), index=True)  # NULL until assigned to a user

    __table_args__ = (
        Index("idx_iot_data_device_timestamp", "device_id", "timestamp"),
    )
