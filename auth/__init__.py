"""
auth — User authentication module.

Provides:
  • JWT token creation & verification
  • Password hashing (bcrypt, configurable work factor)
  • Register / Login / Users / Me API routes
  • ``get_current_identity`` FastAPI dependency
"""
