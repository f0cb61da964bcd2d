"""
Unit tests package.

Covers validation, the workbook builder, report queries and the HTTP
layer in isolation, with the data store mocked out.
"""
