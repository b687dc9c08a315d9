"""
Utility modules for Little Reviews.

Cross-cutting concerns:
- Storage: Record Store and artifact file I/O
"""
