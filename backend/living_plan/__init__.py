"""Living Plan: goal task chains that stay consistent as tasks move."""
