"""Infrastructure Layer — SQL-backed collaborators and cross-cutting concerns.

Invariants:
    - Every store call is bounded by a timeout and mapped to a QuizError
    - Collaborators share the caller's AsyncSession (one transaction per request)

Design Decisions:
    - One adapter per consumed contract (store, identity, questions, profiles)
"""
