"""
Utility functions module.

Time Semantics:
- Snapshot timestamps from the data source are authoritative for windows
- Wall-clock time drives the polling schedule and staleness checks
- The clock is injectable so schedules can be tested without real time passing
"""
