"""Searchwise - search-and-summarize web service."""
