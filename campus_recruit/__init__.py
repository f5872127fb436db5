"""
Campus Recruitment Portal
Students apply to jobs posted by recruiters; admins oversee the directory.

Architecture:
- PostgreSQL: Structured data (users, jobs, applications)
- MongoDB: Shared rate-limit counters
"""

__version__ = "1.0.0"
