"""Models: enums and pydantic schemas shared by the engine, services and API."""
