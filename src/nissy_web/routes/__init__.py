"""HTTP routes: health probe, solver API and static files."""
