"""
Clients for services outside the catalog database.
"""
