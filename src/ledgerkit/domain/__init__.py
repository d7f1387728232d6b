"""Domain layer for ledgerkit application.

Services are imported from their modules (``ledgerkit.domain.category`` and
so on) so that the database layer can import entities without a cycle.
"""
