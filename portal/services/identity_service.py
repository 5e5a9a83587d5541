"""
Identity Derivation Service

PURPOSE:
Infer a display name, role and role-specific attributes from an email
address alone. Used when signing in (never when creating an account,
where the user supplies these values).

HOW IT WORKS:
1. Name: split the local part on '.', '_' and '-', capitalize each piece
2. Role: ordered first-match rules over the email and its domain
3. Department / company: domain fragment lookups per role

Everything here is pure and deterministic.
"""

import re
from typing import NamedTuple, Optional, Tuple

from portal.schemas.schemas import UserRole


DEFAULT_NAME = "User"

# Ordered: first matching fragment wins ("tech" is checked after "infosys").
COMPANY_DOMAINS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("infosys",), "Infosys Limited"),
    (("tcs",), "Tata Consultancy Services"),
    (("wipro",), "Wipro Technologies"),
    (("hcl",), "HCL Technologies"),
    (("tech", "mahindra"), "Tech Mahindra"),
)

GENERIC_COMPANY_SUFFIX = " Technologies"

_NAME_SEPARATORS = re.compile(r"[._-]")


class DerivedAttributes(NamedTuple):
    name: str
    role: UserRole
    department: Optional[str]
    company: Optional[str]


# ============================================================
# EMAIL HELPERS
# ============================================================

def split_email(email: str) -> Tuple[str, str]:
    """Return (local part, domain). Domain is empty when there is no '@'."""
    local, _, domain = email.partition("@")
    # Text after a second "@" is not part of the domain
    domain = domain.split("@")[0]
    return local, domain


def _capitalize(segment: str) -> str:
    return segment[:1].upper() + segment[1:].lower()


# ============================================================
# NAME / ROLE
# ============================================================

def derive_name_from_email(email: str, default: str = DEFAULT_NAME) -> str:
    """
    Turn the local part of an email into a display name.

    "priya.sharma@x.com" -> "Priya Sharma", "bob@x.com" -> "Bob".
    Falls back to `default` when nothing usable is left.
    """
    local, _ = split_email(email)
    parts = [_capitalize(part) for part in _NAME_SEPARATORS.split(local) if part]
    if not parts:
        return default
    return " ".join(parts)


def derive_role_from_email(email: str) -> UserRole:
    """
    Infer a role from an email address.

    Rules are checked in order and the first match wins, so an address
    mentioning both "admin" and "student" is an admin.
    """
    lowered = email.lower()
    _, domain = split_email(lowered)

    if "admin" in lowered or "admin" in domain:
        return UserRole.admin

    if any(marker in lowered for marker in ("placement", "officer", "career")):
        return UserRole.placement_officer

    if any(marker in domain for marker in ("student", ".edu", "university", "college")):
        return UserRole.student

    # Business domains
    return UserRole.employer


# ============================================================
# ROLE-SPECIFIC ATTRIBUTES
# ============================================================

def derive_department(email: str, role: UserRole) -> Optional[str]:
    """Department for institution-side roles; None for employers."""
    if role == UserRole.employer:
        return None

    _, domain = split_email(email.lower())
    if "cs" in domain or "computer" in domain:
        return "Computer Science"
    if "eng" in domain:
        return "Engineering"
    if role == UserRole.placement_officer:
        return "Career Services"
    return "General"


def derive_company(email: str) -> str:
    """
    Map an employer domain to a company name.

    Known domain fragments map to the company's full name; anything else
    becomes the capitalized first domain label plus a generic suffix.
    """
    _, domain = split_email(email.lower())
    for fragments, company in COMPANY_DOMAINS:
        if any(fragment in domain for fragment in fragments):
            return company

    first_label = domain.split(".")[0]
    return (_capitalize(first_label) + GENERIC_COMPANY_SUFFIX).strip()


def derive_identity_attributes(email: str) -> DerivedAttributes:
    """Everything sign-in infers from an email address."""
    role = derive_role_from_email(email)
    department = derive_department(email, role)
    company = derive_company(email) if role == UserRole.employer else None
    return DerivedAttributes(
        name=derive_name_from_email(email),
        role=role,
        department=department,
        company=company,
    )
