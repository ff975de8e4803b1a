"""
Login, token signing and bearer-token checks.
"""
