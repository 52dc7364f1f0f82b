"""
Tracked repository configuration.

Components:
- models.py: data structures (Config, Repository) and the Remote builder
- config_store.py: TOML parse/load/save/init for the config file
- remote_api.py: small helpers for editing a Config
"""
