"""QR Attendance package.

Organized by feature modules (qr, sheets, attendance, teachers, scanner, ...)
with a thin Flask controller layer over service/repository layers. The only
datastore is an append-only spreadsheet reached through ``sheets.RowStore``.
"""
