"""
Award Slides - slide editor and REST API for awardee recognition decks

This package provides a FastAPI-based web service that stores a small,
ordered deck of award slides, together with the editor-side state machines
that edit, lay out and present that deck. It enables:

- CRUD over awardee records in a key-value store
- Photo and logo uploads to a private bucket with time-limited signed URLs
- Batched saves that reconcile a local working copy with the server
- Free-form per-slide layout editing
- Presentation navigation with hidden-slide filtering

Key Components:
    - main: FastAPI application and HTTP endpoint definitions
    - repository: Awardee persistence over the key-value store and storage
    - kv_store: SQLite backed key-value store
    - storage: S3 photo storage and presigned URLs
    - models: Pydantic models for the slide record and API payloads
    - configuration: Config loading and environment overrides
    - client: HTTP client used by the editor
    - editor: Working copy, tab ordering and save reconciliation
    - layout: Element rectangles and pointer gestures
    - presentation: Slide projection and navigation

Usage:
    Run the API server with:
        uvicorn award_slides.main:app --reload --host 0.0.0.0 --port 8000
"""
