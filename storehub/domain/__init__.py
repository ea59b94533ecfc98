"""Domain layer: exceptions, gateway interfaces and pure order services."""
