"""Ambulance dispatch application.

This package contains the patient and dispatch models, the service
layer enforcing the dispatch lifecycle, the REST views and a small
polling client used by ambulance crews.
"""
