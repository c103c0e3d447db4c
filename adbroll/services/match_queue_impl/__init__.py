from .service import MatchJobService

__all__ = ["MatchJobService"]
