from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from app.core.database import Base


class Application(Base):
    """Join row recording that a user applied to a job."""
    __tablename__ = "applications"

    username = Column(String(25), ForeignKey("users.username", ondelete="CASCADE"), primary_key=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), primary_key=True)

    user = relationship("User", back_populates="applications")
    job = relationship("Job")

    def __repr__(self):
        return f"<Application(username='{self.username}', job_id={self.job_id})>"
