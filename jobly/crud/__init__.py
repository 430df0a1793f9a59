"""
Entity services (Create, Read, Update, Delete) for companies, jobs and users.

This layer sits between the API routes and the database: it builds the SQL,
runs it, and turns storage failures into domain errors.
"""

from jobly.crud import company, job, user

__all__ = ["company", "job", "user"]
