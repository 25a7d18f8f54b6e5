"""
Tests for authentication app.

- test_managers.py: UserManager create_user / create_superuser
- test_models.py: User naming, roles, uniqueness
"""
