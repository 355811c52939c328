"""Infrastructure: persistence, object storage and service adapters."""
