"""
Data Transfer Objects

Request and response shapes passed between the API and the use cases.
"""
