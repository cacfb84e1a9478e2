"""Bus ticket booking and attendance tracking backend."""
