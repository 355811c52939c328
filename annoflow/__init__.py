"""annoflow: annotation workflow pipelines (task completion, veto, rollback)."""
