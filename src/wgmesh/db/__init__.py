"""Master-side persistence (peewee + SQLite)."""
