"""
Sheet-driven mail forwarding service.

A Flask API deployed on Google Cloud Run that scans a Google Sheet of
Gmail search queries and forwards the first matching message of each
query to the recipients listed beside it.
"""

__version__ = "1.0.0"
