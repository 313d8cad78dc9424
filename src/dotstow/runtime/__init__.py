"""Host-facing runtime: paths, preflight, bootstrap, verification and doctor checks."""
