"""
auth — User authentication module.

Provides:
  • Signed, time-bounded token issuing & verification
  • Password hashing (bcrypt, configurable work factor)
  • ``AuthService`` — register / login / identity resolution
  • Credential stores (SQLAlchemy and in-memory)
  • Register / Login / Profile API routes per application area
"""
