"""Services that own and mutate shopping list state."""
