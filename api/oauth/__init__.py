"""
Instagram OAuth: link a creator's Instagram identity.
"""
