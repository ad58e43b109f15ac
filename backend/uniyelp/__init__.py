"""UniYelp catalog and rating backend."""
