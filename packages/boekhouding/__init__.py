"""Bookkeeping core for Dutch freelancers (ZZP): bank statement import, BTW and IB reports.

Entry points live in :mod:`boekhouding.api` (library) and
:mod:`boekhouding.cli` (``boekhouding`` console script).
"""
