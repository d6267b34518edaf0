"""
Soil Moisture Collector Backend
===============================

This is the Python package for the backend API.

HOW IT'S ORGANIZED:
------------------
- models/     = Data structures (database tables and JSON shapes)
- services/   = Workers (database access, file uploads)
- routers/    = API endpoints (the doors into our app)
- utils/      = Validation helpers and API errors
- config.py   = Settings from the environment / .env
- main.py     = Puts it all together and starts the server
"""
