"""
View Catalogue - display-time role branching.

Maps a section identifier (what the navigation history holds) to the view
the front end should render for the signed-in role. Record listings and
dashboards themselves live in the front end; this only decides which one.
"""

from typing import Dict, Tuple

from portal.schemas.schemas import UserRole, ViewResponse


DASHBOARDS: Dict[UserRole, str] = {
    UserRole.admin: "AdminDashboard",
    UserRole.student: "StudentDashboard",
    UserRole.employer: "EmployerDashboard",
    UserRole.placement_officer: "PlacementOfficerDashboard",
}

# section -> (title, description, component)
SECTIONS: Dict[str, Tuple[str, str, str]] = {
    "jobs": ("Job Management", "Browse and manage job postings.", "JobManagement"),
    "applications": ("Application Tracking", "Track applications and their status.", "ApplicationTracking"),
    "users": ("User Management", "Manage system users, roles, and permissions.", "ComingSoon"),
    "placements": ("Placement Records", "Track and manage student placement records.", "ComingSoon"),
    "reports": ("Reports & Analytics", "Generate comprehensive reports and analytics.", "ComingSoon"),
    "settings": ("System Settings", "Configure system settings and preferences.", "ComingSoon"),
    "profile": ("My Profile", "Manage your profile information and preferences.", "Profile"),
    "candidates": ("Candidates", "Review candidate profiles.", "CandidatesManagement"),
    "company": ("Company Profile", "View and edit the company profile.", "CompanyProfile"),
    "students": ("Students", "Manage student profiles and academic information.", "ComingSoon"),
    "employers": ("Employers", "Manage employer partnerships and company profiles.", "ComingSoon"),
}

NOT_FOUND = ("Page Not Found", "The requested page could not be found.", "NotFound")


def role_label(role: UserRole) -> str:
    """'placement-officer' -> 'Placement Officer'"""
    return role.value.replace("-", " ").title()


def resolve_view(section: str, role: UserRole) -> ViewResponse:
    """Pick the view to render for `section` as seen by `role`."""
    if section == "dashboard":
        return ViewResponse(
            section=section,
            title=f"{role_label(role)} Dashboard",
            description="Overview of your placement activity.",
            component=DASHBOARDS[role],
            role=role,
        )

    title, description, component = SECTIONS.get(section, NOT_FOUND)
    return ViewResponse(
        section=section,
        title=title,
        description=description,
        component=component,
        role=role,
    )
