"""HTTP API for previewing and committing event imports."""
