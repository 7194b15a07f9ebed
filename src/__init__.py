"""
Kingsman storefront checkout backend
"""
