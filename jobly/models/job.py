from sqlalchemy import CheckConstraint, Column, DateTime, Float, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship
from jobly.core.database import Base


class Job(Base):
    """
    Job posting belonging to a company.
    date_posted is assigned by the database and drives default ordering.
    """
    __tablename__ = "jobs"
    __table_args__ = (
        CheckConstraint("equity >= 0 AND equity <= 1", name="ck_jobs_equity"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    salary = Column(Float, nullable=True)
    equity = Column(Float, nullable=True)
    company_handle = Column(
        String,
        ForeignKey("companies.handle", name="fk_jobs", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )
    date_posted = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    company = relationship("Company", back_populates="jobs")

    def __repr__(self):
        return f"<Job(id={self.id}, title='{self.title}', company_handle='{self.company_handle}')>"
