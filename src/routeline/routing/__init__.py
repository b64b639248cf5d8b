"""Routing — normalized route table with exact-first, then ordered pattern matching.

The table is rebuilt from the raw declarative mapping for each dispatch;
compiled patterns are cached so repeated builds stay cheap.
"""
