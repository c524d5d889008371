"""Core domain logic: statistics, data transfer and metadata lookup."""
