# Domain package for automobile usage
"""
Domain models, repository and lookup interfaces, and the error taxonomy for
automobile usage. Nothing here depends on storage or transport.
"""
