"""HTTP adapter: pydantic models, dependencies and routes over one wheel session."""
