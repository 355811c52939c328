"""Application layer: interfaces, workflow pipelines, services, use cases."""
