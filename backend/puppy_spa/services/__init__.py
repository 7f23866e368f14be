"""
Services Layer

Business logic for waiting lists and their entries:
- Accept domain inputs (IDs, sessions, plain data)
- Return SQLModel instances or plain data
- Do NOT depend on HTTP request/response objects
- Raise errors from services.errors, never HTTPException
"""
