"""
Burn Watch Backend
==================

This is the Python package for the backend API.

HOW IT'S ORGANIZED:
------------------
- models/      = Data structures (what does a report look like?)
- services/    = Workers (normalize, filter, talk to Firestore)
- routers/     = API endpoints (the doors into our app)
- utils/       = Number parsing helpers
- exceptions.py = What can go wrong, and how bad it is
- main.py      = Puts it all together and starts the server
"""
