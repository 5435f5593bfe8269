"""
Missing Persons Browser — browse, search and page through missing-person cases.

Architecture: Fetch → Deduplicate → Extract → Filter / Recent → Paginate
Philosophy:  The feed is free text. Parse it conservatively and never fail on it.
"""

__version__ = "1.0.0"
