"""
Vendor API payload models.

    - schemas.py: Pydantic models for FakeYou request/response bodies
"""
