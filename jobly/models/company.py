from sqlalchemy import CheckConstraint, Column, Integer, String, Text
from sqlalchemy.orm import relationship
from jobly.core.database import Base


class Company(Base):
    """
    A company in the directory, identified by its handle.
    Owns zero or more jobs; deleting a company deletes its jobs.
    """
    __tablename__ = "companies"
    __table_args__ = (
        CheckConstraint("num_employees >= 0", name="ck_companies_num_employees"),
    )

    handle = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    num_employees = Column(Integer, nullable=True)
    description = Column(Text, nullable=True)
    logo_url = Column(Text, nullable=True)

    jobs = relationship("Job", back_populates="company", passive_deletes=True)

    def __repr__(self):
        return f"<Company(handle='{self.handle}', name='{self.name}')>"
