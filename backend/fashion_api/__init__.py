"""
Fashion AI backend: the HTTP API between the web client, the database and the AI engine.
"""
__version__ = "1.0.0"
