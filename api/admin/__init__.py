"""
Shared-secret admin guard.
"""
