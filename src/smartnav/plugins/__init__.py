"""Plugin package initialiser.

Kept side-effect free: concrete plugin modules (``logging``, ``pydantic``)
register themselves when imported (``smartnav.__init__`` imports both).
"""

__all__: list[str] = []
