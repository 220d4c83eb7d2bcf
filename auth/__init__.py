"""
auth — credential and session core.

Provides:
  • CredentialStore (in-memory identities)
  • bcrypt password hashing with a process-wide salt
  • SHA-256 signature verification with PEM repair
  • SessionManager (single live session, 5 minute TTL)
  • AuthCore (register / login / store_key / verify_message)
"""
