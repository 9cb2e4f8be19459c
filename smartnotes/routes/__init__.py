# Routes package init
"""
SmartNotes Backend — API Routes Package
=========================================

Route Inventory:
    - auth.py:      POST /api/auth/signup | signin | signout, GET /api/auth/me
    - summarize.py: POST /api/summarize
    - notes.py:     /api/notes (CRUD, search, export, tag links)
    - organize.py:  /api/folders, /api/tags
    - profile.py:   /api/profile, GET /api/dashboard
    - health.py:    GET /health

Routes stay thin: extract request data, call a service or the facade,
shape the response. Business rules live in services/.
"""
