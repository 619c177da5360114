"""
Pecha Gateway
FastAPI gateway in front of the OpenPecha REST API
"""

__version__ = "1.0.0"
