"""
services/ - Business Logic Layer
================================
Use cases over the repositories. Every operation that acts for a user takes
the principal explicitly. Services return domain objects and raise domain
errors; formatting replies is left to the handlers.
"""
