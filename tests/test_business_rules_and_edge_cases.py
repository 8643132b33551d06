from datetime import date

import pytest

from core.exceptions import NotFoundError, ValidationError
from core.models import ProjectStatus, RequiredRole, RequiredSkill


def test_project_name_validation_rules(services):
    ps = services["project_service"]
    ps.create_project("Existing Project")

    with pytest.raises(ValidationError) as exc:
        ps.create_project("AB")
    assert exc.value.code == "PROJECT_NAME_TOO_SHORT"

    with pytest.raises(ValidationError) as exc:
        ps.create_project("   ")
    assert exc.value.code == "PROJECT_NAME_EMPTY"

    with pytest.raises(ValidationError) as exc:
        ps.create_project("existing project")
    assert exc.value.code == "PROJECT_NAME_DUPLICATE"


def test_project_window_budget_and_requirements(services):
    ps = services["project_service"]

    with pytest.raises(ValidationError) as exc:
        ps.create_project("Backwards", start_date=date(2026, 3, 1), end_date=date(2026, 2, 1))
    assert exc.value.code == "PROJECT_END_BEFORE_START"

    with pytest.raises(ValidationError) as exc:
        ps.create_project("Negative Budget", planned_budget=-1.0)
    assert exc.value.code == "BUDGET_NEGATIVE"

    with pytest.raises(ValidationError) as exc:
        ps.create_project("No Heads", required_roles=[RequiredRole("Developer", 0)])
    assert exc.value.code == "ROLE_COUNT_INVALID"

    project = ps.create_project(
        "Staffed Project",
        client_name=" Acme ",
        required_skills=[RequiredSkill(" Python ")],
        required_roles=[RequiredRole("Developer", 2)],
    )
    assert project.currency == "EUR"
    assert project.client_name == "Acme"
    loaded = ps.get_project(project.id)
    assert [s.name for s in loaded.required_skills] == ["Python"]
    assert [(r.name, r.count) for r in loaded.required_roles] == [("Developer", 2)]


def test_project_status_filter_and_update(services):
    ps = services["project_service"]
    active = ps.create_project("Active One", status=ProjectStatus.ACTIVE)
    ps.create_project("Planned One")

    assert [p.id for p in ps.list_projects_by_status(ProjectStatus.ACTIVE)] == [active.id]

    ps.update_project(active.id, status=ProjectStatus.COMPLETED, end_date=date(2026, 12, 31))
    assert ps.list_projects_by_status(ProjectStatus.ACTIVE) == []

    with pytest.raises(NotFoundError) as exc:
        ps.update_project("missing", name="Nope")
    assert exc.value.code == "PROJECT_NOT_FOUND"
