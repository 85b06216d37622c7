"""
Infrastructure Layer

Clients for external NLU services.
"""
