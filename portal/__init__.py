"""
Placement Portal - Session Core
Role-based client core for a placement-coordination portal.

Architecture:
- Session lifecycle: sign in / create account / sign out state machine
- Session store: one persisted identity slot (SQLite via SQLAlchemy)
- View router: navigation history with a back action and keyboard shortcut
"""

__version__ = "1.0.0"
__author__ = "Student"
