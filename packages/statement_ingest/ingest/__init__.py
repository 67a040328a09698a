"""Statement ingestion: shared utilities and per-strategy adapters."""
