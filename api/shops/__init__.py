"""
Shop CRUD and listing filtered by shop, product and owner attributes.
"""
