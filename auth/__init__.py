"""
auth — User authentication module.

Provides:
  • Signed token creation & verification
  • Password hashing (bcrypt)
  • ``get_current_user_id`` FastAPI dependency (the authorization guard)
"""
