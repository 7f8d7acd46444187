"""
Business rules shared by the API routes.
"""
