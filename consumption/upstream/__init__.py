"""Consumption API transport package.

Module split:
    - `provider_config`: environment-driven endpoint configuration.
    - `client`: header construction, HTTP POST, upstream status errors.
    - `service`: chat/steps and project/classify entrypoints.
"""
