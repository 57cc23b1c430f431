"""Functions served by the timer host."""
