"""Domain services: discovery, graph assembly, external metadata."""
