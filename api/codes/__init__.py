"""
Code registry: stores, discount codes and creator links.
"""
