"""sheet2db: import spreadsheet workbooks into relational tables.

Table structure (names, column types, string sizes) is inferred from the
workbook data itself.
"""

__version__ = "0.1.0"
