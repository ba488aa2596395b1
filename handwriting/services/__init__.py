"""Server-side services: upstream extraction, preview rendering, PDF export."""
