"""Application layer: services exposed to the API and other collaborators."""
