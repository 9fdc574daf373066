from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    facebook_account = relationship(
        "FacebookAccount", back_populates="project", uselist=False, cascade="all, delete-orphan"
    )
    campaigns = relationship("Campaign", back_populates="project")
    videos = relationship("Video", back_populates="project")

    def __repr__(self):
        return f"<Project(id={self.id}, name={self.name})>"
