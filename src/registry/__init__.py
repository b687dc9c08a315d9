"""
Review catalogue: the in-memory collection loaded for one session.
"""
