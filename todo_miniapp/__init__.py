"""
To-Do Mini App Backend.

- core/: Configuration, logging, security, database, error handling
- models/: SQLAlchemy models (users, tasks, sessions)
- repositories/: Data access, every statement scoped by owner
- services/: Business logic (auth, sessions, tasks)
- schemas/: Pydantic request/response schemas
- api/: FastAPI routers
"""
