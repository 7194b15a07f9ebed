"""
Application services shared by several use cases
"""
