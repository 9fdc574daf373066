from sqlalchemy import Column, Integer, BigInteger, Date, Numeric, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.database import Base


class Insight(Base):
    """Daily performance row for a cached campaign. One row per (campaign, date)."""
    __tablename__ = "insights"
    __table_args__ = (UniqueConstraint("campaign_id", "date", name="uq_insights_campaign_date"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    campaign_id = Column(Integer, ForeignKey('campaigns.id', ondelete='CASCADE'), nullable=False, index=True)
    date = Column(Date, nullable=False)
    impressions = Column(BigInteger, nullable=False, default=0)
    reach = Column(BigInteger, nullable=False, default=0)
    spend = Column(Numeric(12, 2), nullable=False, default=0)
    cpi = Column(Numeric(12, 4), nullable=False, default=0)

    # Relationships
    campaign = relationship("Campaign", back_populates="insights")

    def __repr__(self):
        return f"<Insight(id={self.id}, campaign_id={self.campaign_id}, date={self.date})>"
