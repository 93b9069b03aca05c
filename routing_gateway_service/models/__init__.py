"""
Data models for the Routing Gateway Service.

Contains the immutable pipeline values and the Pydantic schemas for
request bodies the gateway validates.
"""
