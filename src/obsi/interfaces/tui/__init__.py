"""Full-screen terminal UI."""
