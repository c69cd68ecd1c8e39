"""
Rank API package.

A FastAPI service that collects scores for items grouped by project and
keeps a running average per item in Firestore, with an in-memory backend
for tests and local runs.
"""
