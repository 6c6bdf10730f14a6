"""TalentTrack HR backend.

Feature packages (auth, leaves, notifications, resources) sit on a thin Flask
controller layer; all database access goes through
``database.connection.ConnectionManager``.
"""
