"""
form_intake package.

Web form intake and CSV batch import sharing one validation core.
"""

__version__ = "1.0.0"
