"""
Signup Form - state and validation for the create-account screen.

The name and role are suggested from the email once, when the email field
loses focus. After the user types a name themselves the suggestion is
never applied again, so derived values cannot overwrite manual edits.
"""

import re
from typing import Dict, Optional

from portal.schemas.schemas import SignupData, UserRole
from portal.services.identity_service import derive_name_from_email, derive_role_from_email

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")

# Roles that belong to an institution department rather than a company
DEPARTMENT_ROLES = (UserRole.student, UserRole.placement_officer, UserRole.admin)


class SignupForm:

    def __init__(self, min_password_length: int = 6):
        self.min_password_length = min_password_length
        self.name = ""
        self.email = ""
        self.password = ""
        self.confirm_password = ""
        self.role = UserRole.student
        self.department = ""
        self.company = ""
        self.phone = ""
        self.name_overridden = False

    # ------------------------------------------------------------
    # Field events
    # ------------------------------------------------------------

    def set_email(self, email: str) -> None:
        self.email = email
        if not email:
            # Starting over re-enables the suggestion
            self.name_overridden = False

    def on_email_blur(self) -> bool:
        """
        Suggest name and role from the email. Returns True if applied.
        """
        if not self.email or self.name_overridden:
            return False

        derived_name = derive_name_from_email(self.email, default="")
        if not derived_name:
            return False

        self.name = derived_name
        self.set_role(derive_role_from_email(self.email))
        return True

    def set_name(self, name: str) -> None:
        self.name = name
        self.name_overridden = True

    def set_role(self, role: UserRole) -> None:
        # Role-specific fields belong to the previous role
        if role != self.role:
            self.department = ""
            self.company = ""
        self.role = role

    # ------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------

    def validate(self) -> Dict[str, str]:
        """Return field -> message for every problem; empty when the form is valid."""
        errors: Dict[str, str] = {}

        if not self.name.strip():
            errors["name"] = "Full name is required"

        if not self.email:
            errors["email"] = "Email is required"
        elif not EMAIL_PATTERN.search(self.email):
            errors["email"] = "Please enter a valid email address"

        if not self.password:
            errors["password"] = "Password is required"
        elif len(self.password) < self.min_password_length:
            errors["password"] = f"Password must be at least {self.min_password_length} characters long"

        if not self.confirm_password:
            errors["confirm_password"] = "Please confirm your password"
        elif self.password != self.confirm_password:
            errors["confirm_password"] = "Passwords do not match"

        if self.role == UserRole.student and not self.department:
            errors["department"] = "Department is required for students"
        elif self.role in DEPARTMENT_ROLES and not self.department:
            errors["department"] = "Department is required"

        if self.role == UserRole.employer and not self.company:
            errors["company"] = "Company name is required for employers"

        return errors

    def to_signup_data(self) -> SignupData:
        return SignupData(
            name=self.name.strip(),
            email=self.email,
            password=self.password,
            confirm_password=self.confirm_password,
            role=self.role,
            department=_blank_to_none(self.department),
            company=_blank_to_none(self.company),
            phone=_blank_to_none(self.phone),
        )


def _blank_to_none(value: str) -> Optional[str]:
    return value or None
