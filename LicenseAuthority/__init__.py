"""
License Authority Django project.

Issues, validates and renews licenses signed by an external
key-management service.
"""
