"""
Third-party service integrations.
"""
