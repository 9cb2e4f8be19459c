# Services package init
"""
SmartNotes Backend — Service Layer
====================================

    - data_access.py:    DataAccessFacade, owner-scoped storage
    - auth_service.py:   sign-up/in/out and token resolution
    - llm_base.py:       SummarizationService interface
    - gemini_service.py: Gemini-backed summarizer with circuit breaker
    - note_service.py:   note flows (save, list, detail, edit, export, dashboard)
    - export.py:         plain-text / Markdown formatter (pure)
    - search.py:         in-memory note filter (pure)
"""
