"""
HTTP API package: FastAPI routers and app assembly.
"""
