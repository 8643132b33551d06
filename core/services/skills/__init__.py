from .coverage import analyze_project_coverage, normalize_role, roles_match
from .service import SkillsCoverageService

__all__ = [
    "SkillsCoverageService",
    "analyze_project_coverage",
    "normalize_role",
    "roles_match",
]
