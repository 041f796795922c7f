"""
Product CRUD and filtered listing.
"""
