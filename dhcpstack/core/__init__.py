"""Runtime support shared by the server components."""
