"""
security/ - Credentials & Access
================================
Password hashing, the in-memory session store holding each chat's principal,
and the Telegram middleware (login_required, rate_limited).
"""
