"""
External service integrations: the Tranzila payment page and the
storefront HTTP client
"""
