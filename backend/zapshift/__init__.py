"""
zapShift Backend — Application Package Initializer
===================================================

What: Marks the `zapshift` directory as a Python package.
Why:  Enables module imports like `from zapshift.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The backend keeps a layered structure even though every operation is a
    single document-store call:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Guards (Access Gate chain)      │  ← identity + role checks
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← validation, one store call
    ├─────────────────────────────────────┤
    │            Schemas (Data)           │  ← Pydantic record types
    ├─────────────────────────────────────┤
    │     Database (Document Store)       │  ← shared AsyncMongoClient
    └─────────────────────────────────────┘

    External collaborators (Firebase Authentication, Stripe) sit behind
    abstract interfaces in `zapshift.services` so tests can swap them out.
"""

__version__ = "1.0.0"
