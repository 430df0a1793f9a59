from sqlalchemy import Boolean, Column, String, Text, false
from jobly.core.database import Base


class User(Base):
    """
    User account. `password` only ever holds a bcrypt hash.
    """
    __tablename__ = "users"

    username = Column(String, primary_key=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True)
    password = Column(String, nullable=False)
    photo_url = Column(Text, nullable=True)
    is_admin = Column(Boolean, server_default=false(), nullable=False)

    def __repr__(self):
        return f"<User(username='{self.username}', is_admin={self.is_admin})>"
