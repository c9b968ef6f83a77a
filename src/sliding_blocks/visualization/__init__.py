"""pygame rendering and interactive play for sliding-block boards."""
