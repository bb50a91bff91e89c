"""
Task manager services: account registration and login, token issuing, task
lifecycle and task queries.

Services receive their configuration as explicit objects and their storage
through repository/handler instances; none of them read settings directly.
"""
