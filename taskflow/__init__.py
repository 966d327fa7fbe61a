"""taskflow - Task management backend with skill-based auto-assignment."""
