"""
Email/password accounts.
"""
