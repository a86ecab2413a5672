"""
HTTP adapter exposing the import preview endpoint.
"""
