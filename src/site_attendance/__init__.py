"""Site attendance reconciliation.

This package is organized by feature modules (geo, attendance, schedules,
tenants, sites, batch, analytics) with a thin Flask controller layer and
service/repository layers. The reconciliation engine in
``attendance.reconciliation`` is pure; everything that touches MySQL lives
behind the ``repository.py`` protocols.
"""
