"""
Invoice dashboard backend: invoice/customer queries and form actions over PostgreSQL
"""

__version__ = "1.0.0"
