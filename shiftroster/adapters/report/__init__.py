"""Report writers for month grids."""
