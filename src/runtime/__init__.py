"""
Run-time components for Little Reviews.

Work on the loaded aggregate artifact:
- Loader: fetch the artifact once at startup
- Query: filter, search and sort
- Navigation: view state and the shareable location string
- Authoring: produce single-record YAML documents
"""
