"""MeliMou backend: Greek learning platform API."""
