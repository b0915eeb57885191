"""Outer surfaces driving a SearchSession: REST API and terminal game loop."""
