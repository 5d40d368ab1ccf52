"""Application services that host the ranking engine over local files."""
