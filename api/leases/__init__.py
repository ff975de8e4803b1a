"""
Lease search and lease lookup.
"""
