"""
Schedules Domain

Shift requests: employees submit shifts, managers approve or reject them,
administrators can edit anything. Every mutation goes through the
authorization service in app/authorization.

- schemas.py     request/response models
- repository.py  queries, including the read visibility filter
- service.py     use cases and the order their checks run in
- router.py      /schedules endpoints
"""
