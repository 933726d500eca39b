"""Cross-cutting helpers with no domain knowledge."""
