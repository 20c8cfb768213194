"""Domain-specific library modules.

Modules here operate on nowlyrics domain models and hold the pure
matching logic (normalization, signatures, scoring). Generic helpers
that don't depend on domain models live in ``nowlyrics.utils`` instead.

Consumers should import directly from submodules::

    from nowlyrics.lib.normalize import normalize_text
    from nowlyrics.lib.matching import select_best_candidate
"""
