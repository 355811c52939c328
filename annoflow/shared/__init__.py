"""Cross-cutting helpers: telemetry (logging, tracing) and small utilities."""
