"""
Contract test fixtures.

Contract tests call internal endpoints with service-role auth, through
``accounts_client`` and ``service_role_override`` from the root conftest.
"""
