"""
Gateway utilities
"""
