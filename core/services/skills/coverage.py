from __future__ import annotations

import re
from typing import Dict, Iterable, List

from core.models import (
    Project,
    RequiredSkill,
    Resource,
    ResourceSkill,
    RoleCoverage,
    SkillsCoverage,
)

_ROLE_SEPARATORS = re.compile(r"[-_]+")
_WHITESPACE = re.compile(r"\s+")


def normalize_role(name: str | None) -> str:
    token = _ROLE_SEPARATORS.sub(" ", (name or "").lower())
    return _WHITESPACE.sub(" ", token).strip()


def roles_match(resource_role: str | None, required_role: str | None) -> bool:
    """
    Fuzzy role match: equal after normalization, or either contains the other.

    Substring matching is a heuristic; "qa" also matches "qa lead".
    """
    have = normalize_role(resource_role)
    want = normalize_role(required_role)
    if not have or not want:
        return False
    return have == want or have in want or want in have


def _skill_key(name: str | None) -> str:
    return (name or "").strip().lower()


def skill_satisfies(skill: ResourceSkill, requirement: RequiredSkill) -> bool:
    if _skill_key(skill.name) != _skill_key(requirement.name):
        return False
    if requirement.min_proficiency is None:
        return True
    if skill.proficiency is None:
        return False
    return skill.proficiency.rank >= requirement.min_proficiency.rank


def is_skill_covered(requirement: RequiredSkill, resources: Iterable[Resource]) -> bool:
    return any(skill_satisfies(s, requirement) for r in resources for s in r.skills)


def _coverage_percentage(covered: int, required: int) -> float:
    if required <= 0:
        return 100.0
    return round(covered / required * 100.0, 2)


def analyze_project_coverage(project: Project, assigned: Iterable[Resource]) -> SkillsCoverage:
    assigned = list(assigned)
    covered: List[str] = []
    missing: List[str] = []
    seen: set[str] = set()
    for requirement in project.required_skills:
        key = _skill_key(requirement.name)
        if not key or key in seen:
            continue
        seen.add(key)
        if is_skill_covered(requirement, assigned):
            covered.append(requirement.name.strip())
        else:
            missing.append(requirement.name.strip())

    roles: List[RoleCoverage] = []
    for required_role in project.required_roles:
        count = max(0, int(required_role.count or 0))
        matched = sum(1 for r in assigned if roles_match(r.role, required_role.name))
        roles.append(
            RoleCoverage(
                role=required_role.name,
                required=count,
                assigned=matched,
                fulfilled=matched >= count,
                gap=max(0, count - matched),
            )
        )

    return SkillsCoverage(
        coverage_percentage=_coverage_percentage(len(covered), len(covered) + len(missing)),
        covered=covered,
        missing=missing,
        roles=roles,
    )


def assigned_resources(project_id: str, resources: Iterable[Resource]) -> List[Resource]:
    return [r for r in resources if any(a is not None and a.project_id == project_id for a in r.allocations)]


def analyze_portfolio_coverage(
    projects: Iterable[Project],
    resources: Iterable[Resource],
) -> tuple[SkillsCoverage, Dict[str, SkillsCoverage]]:
    """
    Coverage for every project with requirements, plus the combined figure.

    A skill counts as covered overall only when it is covered on every project
    that requires it, and as missing when any such project lacks it.
    """
    resources = list(resources)
    per_project: Dict[str, SkillsCoverage] = {}
    total_required = 0
    total_covered = 0
    covered_names: Dict[str, str] = {}
    missing_names: Dict[str, str] = {}
    roles: List[RoleCoverage] = []

    for project in projects:
        if not project.required_skills and not project.required_roles:
            continue
        coverage = analyze_project_coverage(project, assigned_resources(project.id, resources))
        per_project[project.id] = coverage
        total_required += len(coverage.covered) + len(coverage.missing)
        total_covered += len(coverage.covered)
        for name in coverage.covered:
            covered_names.setdefault(_skill_key(name), name)
        for name in coverage.missing:
            missing_names.setdefault(_skill_key(name), name)
        roles.extend(coverage.roles)

    overall = SkillsCoverage(
        coverage_percentage=_coverage_percentage(total_covered, total_required),
        covered=[name for key, name in covered_names.items() if key not in missing_names],
        missing=list(missing_names.values()),
        roles=roles,
    )
    return overall, per_project


__all__ = [
    "normalize_role",
    "roles_match",
    "skill_satisfies",
    "is_skill_covered",
    "analyze_project_coverage",
    "assigned_resources",
    "analyze_portfolio_coverage",
]
