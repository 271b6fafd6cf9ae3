"""
form_intake/api package marker.
"""
