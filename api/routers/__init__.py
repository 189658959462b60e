"""
API Routers - endpoint handlers for the registration API.

- registration: registration session lifecycle
"""
