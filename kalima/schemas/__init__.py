"""
Pydantic schemas for request validation
"""
