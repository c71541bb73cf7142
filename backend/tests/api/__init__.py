"""
HTTP endpoint tests run through the Flask test client.
"""
