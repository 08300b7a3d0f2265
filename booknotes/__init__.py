"""Book Notes - Core Application Package

This package contains the application modules:
- Web routes and views (api.py, templates/)
- Note storage and queries (library.py, database.py)
- Data model (book.py)
- List orderings (sorting.py)
- Form checks (validators.py)
- CLI interface (main.py)
"""

__version__ = "1.0.0"
