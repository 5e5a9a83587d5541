"""
Services module - the session core.

- identity_service: email -> name / role / department / company
- session_store: the single persisted identity slot
- session_service: sign in / sign up / sign out state machine
- navigation_service: view history, back shortcut, view router
- signup_form: create-account form state and validation
- views: role-branched view catalogue
- portal_context: wires one portal instance together
"""
