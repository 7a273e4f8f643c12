"""Clinic application for the MediCore backend.

This package contains the models, serializers, services, views and
route registrations implementing the hospital management API.
"""
