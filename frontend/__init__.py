"""
Pecha client core
Cached gateway queries, creation forms and list state, independent of any UI framework
"""
