"""Domain layer for fintrack.

Services live in their own modules (``fintrack.domain.account`` and so on)
and are imported from there. The database layer imports
``fintrack.domain.entities``, so this package must not import the services,
which themselves depend on the database layer.
"""
