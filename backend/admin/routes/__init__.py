"""
Admin HTTP routes.
"""
