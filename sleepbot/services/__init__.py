"""Services behind the survey conversation."""
