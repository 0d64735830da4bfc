"""Service Layer — orchestration of IO around the pure game rules.

Invariants:
    - Services own transaction boundaries (commit / rollback)
    - Routes never mutate sessions directly; they call SessionEngine
"""
