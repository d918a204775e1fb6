"""
Garage Hub: multi-tenant garage management API.
"""
