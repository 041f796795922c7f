"""
Login, registration and bearer-token resolution.
"""
