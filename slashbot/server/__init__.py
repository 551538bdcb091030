"""Process entry point and bot service lifecycle."""
