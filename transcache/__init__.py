"""
transcache - translated article titles and bodies, cached.
"""

__version__ = "0.1.0"
