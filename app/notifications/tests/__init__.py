"""
Tests for notifications app.

- test_models.py: Notification defaults and ordering
- test_services.py: notify, listing with limits, mark read
- test_views.py: Notification REST endpoints
"""
