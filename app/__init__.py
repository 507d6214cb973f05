"""Game night application - storage, services and DI container."""
