"""Clinic application for the HealthWave backend.

This package holds the entity store and its persistence, the session and
authorization services, and the API views that expose them.
"""
