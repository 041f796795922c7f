"""
User read/update/delete and filtered listing.
"""
