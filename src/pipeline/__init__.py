"""
Build-time pipeline for Little Reviews.

Turns the Record Store into the aggregate artifact:
- Ingestion: parse and validate one record file
- Aggregation: collect, de-duplicate and sort all records
- Report: per-media-type summary table
"""
