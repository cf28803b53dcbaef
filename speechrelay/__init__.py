"""Speech translation relay backend."""
