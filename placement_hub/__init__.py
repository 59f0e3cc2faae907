"""
Campus Placement Hub
Placement platform connecting students, mentors, TnP officers and recruiters.

Architecture:
- PostgreSQL: profiles, portfolios, job postings, applications
- AI gateway: recommendations, job matching and career tools, always with
  a local fallback
"""

__version__ = "1.0.0"
