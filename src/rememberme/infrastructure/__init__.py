"""Infrastructure layer — access to the external contact store's exports."""
