"""
handlers/ - Presentation Layer
================================
Telegram bot handlers. Each handler parses the command, receives the session
principal from `login_required`, delegates to the appropriate Service and
sends the response back to the user.
No business logic lives here.
"""
