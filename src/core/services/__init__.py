"""Services: date parsing and timesheet orchestration."""
