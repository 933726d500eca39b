"""Infrastructure: SQL persistence, local file storage, JWT verification."""
