"""Operations over the config document.

Each module provides plain functions that encapsulate context CRUD and
business rules.  Managers accept a ``Config`` as a parameter and raise
domain exceptions (``LookupError``, ``ValueError`` subclasses from
``browser_contexts.errors``), never click exceptions -- that translation
is the CLI's responsibility.
"""
