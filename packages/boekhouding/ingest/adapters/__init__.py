"""Per-bank adapters mapping a decoded export to :class:`~boekhouding.models.ParsedRow`.

Every adapter module exposes the same surface: ``FORMAT``, ``ENCODING``,
``detect(text) -> bool`` and ``parse(text) -> list[ParsedRow]``.
"""
