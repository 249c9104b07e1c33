"""Users app package.

Defines the e-mail based ``CustomUser`` (the project's AUTH_USER_MODEL),
host profiles, authentication flows, the self-service profile API, the
host API and the platform admin API under ``apps.users.api``.
"""
