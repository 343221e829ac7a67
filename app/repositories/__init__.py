"""
app/repositories package marker.
"""

from app.repositories.profile_result_repository import ProfileResultRepository

__all__ = ["ProfileResultRepository"]
