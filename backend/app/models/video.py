from sqlalchemy import Column, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base


class Video(Base):
    __tablename__ = "videos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey('projects.id', ondelete='CASCADE'), nullable=False, index=True)
    fb_video_id = Column(String(100), nullable=False)
    file_name = Column(String(255), nullable=False)
    thumbnail_url = Column(Text, nullable=False, default="")

    # Relationships
    project = relationship("Project", back_populates="videos")

    def __repr__(self):
        return f"<Video(id={self.id}, fb_video_id={self.fb_video_id}, file_name={self.file_name})>"
