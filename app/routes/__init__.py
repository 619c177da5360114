"""
Gateway routes
"""
